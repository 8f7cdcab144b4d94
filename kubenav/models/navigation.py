"""Data models for the navigation position and the exec detour."""

from enum import Enum

from pydantic import BaseModel, Field

from kubenav.models.listing import ListingResult


class Depth(Enum):
    """Position in the namespace -> pod -> container -> logs/exec hierarchy."""

    NAMESPACES = (0, "Namespaces")
    PODS = (1, "Pods")
    CONTAINERS = (2, "Containers")
    LOGS = (3, "Logs")
    EXEC_INPUT = (4, "Command")
    EXEC_OUTPUT = (5, "Output")

    def __init__(self, ordinal: int, label: str):
        self.ordinal = ordinal
        self.label = label

    @property
    def is_exec(self) -> bool:
        return self in (Depth.EXEC_INPUT, Depth.EXEC_OUTPUT)

    def __ge__(self, other: "Depth") -> bool:
        if not isinstance(other, Depth):
            return NotImplemented
        return self.ordinal >= other.ordinal

    def __gt__(self, other: "Depth") -> bool:
        if not isinstance(other, Depth):
            return NotImplemented
        return self.ordinal > other.ordinal

    def __le__(self, other: "Depth") -> bool:
        if not isinstance(other, Depth):
            return NotImplemented
        return self.ordinal <= other.ordinal

    def __lt__(self, other: "Depth") -> bool:
        if not isinstance(other, Depth):
            return NotImplemented
        return self.ordinal < other.ordinal


class NavigationContext(BaseModel):
    """Selections made while descending the hierarchy."""

    namespace: str | None = None
    pod: str | None = None
    container: str | None = None

    def breadcrumb(self) -> str:
        """Join the defined selections, e.g. ``default / web-0 / nginx``."""
        parts = [part for part in (self.namespace, self.pod, self.container) if part]
        return " / ".join(parts) if parts else "cluster"


class ExecSession(BaseModel):
    """Command text and result of the current exec detour."""

    command: str = ""
    stdout: str = ""
    stderr: str = ""
    error: str | None = None


class NavigationState(BaseModel):
    """Everything the navigator owns: depth, selections, current listing and exec session."""

    depth: Depth = Depth.NAMESPACES
    context: NavigationContext = Field(default_factory=NavigationContext)
    listing: ListingResult = Field(
        default_factory=lambda: ListingResult(title=Depth.NAMESPACES.label)
    )
    session: ExecSession = Field(default_factory=ExecSession)
    current_log: str = ""
