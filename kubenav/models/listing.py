"""Data models for listings, exec results and rendered views."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ItemKind(str, Enum):
    """What a list entry holds: real data or an error shown in place of data."""

    LABEL = "label"
    ERROR_PLACEHOLDER = "error_placeholder"


class ListItem(BaseModel):
    """One selectable entry of a listing."""

    model_config = ConfigDict(frozen=True)

    kind: ItemKind = ItemKind.LABEL
    text: str

    @classmethod
    def label(cls, text: str) -> "ListItem":
        return cls(kind=ItemKind.LABEL, text=text)

    @classmethod
    def error(cls, text: str) -> "ListItem":
        return cls(kind=ItemKind.ERROR_PLACEHOLDER, text=text)

    @property
    def is_error(self) -> bool:
        return self.kind is ItemKind.ERROR_PLACEHOLDER


class ListingResult(BaseModel):
    """Items fetched for one view, plus the title shown above them."""

    title: str
    items: list[ListItem] = Field(default_factory=list)

    @classmethod
    def from_labels(cls, title: str, labels: list[str]) -> "ListingResult":
        return cls(title=title, items=[ListItem.label(label) for label in labels])

    @classmethod
    def from_error(cls, title: str, message: str) -> "ListingResult":
        return cls(title=title, items=[ListItem.error(message)])

    @property
    def labels(self) -> list[str]:
        return [item.text for item in self.items]


class ExecResult(BaseModel):
    """Captured output of a command run inside a container."""

    stdout: str = ""
    stderr: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Action(str, Enum):
    """Key actions a view can advertise in its help strip."""

    SELECT = "select"
    BACK = "back"
    EXEC = "exec"


class NavEvent(str, Enum):
    """Symbolic input events consumed by the navigator."""

    SELECT = "select"
    BACK = "back"
    EXEC_REQUESTED = "exec_requested"


class Projection(BaseModel):
    """Presentation-ready view: what the list widget should show."""

    model_config = ConfigDict(frozen=True)

    title: str
    subtitle: str
    items: tuple[ListItem, ...] = ()
    actions: frozenset[Action] = frozenset()
