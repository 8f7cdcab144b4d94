"""Navigation state machine: namespaces -> pods -> containers -> logs, plus the exec detour."""

from collections.abc import Callable

from kubenav.exceptions import ClusterQueryError
from kubenav.gateway import ResourceGateway
from kubenav.logging_config import get_logger
from kubenav.models import (
    Depth,
    ExecSession,
    ListingResult,
    ListItem,
    NavEvent,
    NavigationContext,
    NavigationState,
    Projection,
)
from kubenav.projection import project, split_output

logger = get_logger(__name__)

EXEC_ERROR_TEMPLATE = (
    "Error occurred while exec'ing into pod {pod!r}, container {container!r}, "
    "namespace {namespace!r}, command {command!r}: {error}"
)

# Depth reached by a select at each listing depth, and the context field it sets
_SELECT_TARGETS: dict[Depth, tuple[str, Depth]] = {
    Depth.NAMESPACES: ("namespace", Depth.PODS),
    Depth.PODS: ("pod", Depth.CONTAINERS),
    Depth.CONTAINERS: ("container", Depth.LOGS),
}

# Exec sub-states return straight to the container list
_BACK_TARGETS: dict[Depth, Depth] = {
    Depth.PODS: Depth.NAMESPACES,
    Depth.CONTAINERS: Depth.PODS,
    Depth.LOGS: Depth.CONTAINERS,
    Depth.EXEC_INPUT: Depth.CONTAINERS,
    Depth.EXEC_OUTPUT: Depth.CONTAINERS,
}

_LISTINGS: dict[Depth, Callable[[ResourceGateway, NavigationContext], list[ListItem]]] = {
    Depth.NAMESPACES: lambda gateway, ctx: gateway.list_namespaces(),
    Depth.PODS: lambda gateway, ctx: gateway.list_pods(ctx.namespace),
    Depth.CONTAINERS: lambda gateway, ctx: gateway.list_containers(ctx.namespace, ctx.pod),
    Depth.LOGS: lambda gateway, ctx: gateway.fetch_logs(
        ctx.namespace, ctx.pod, ctx.container or ""
    ),
}


def error_text(error: ClusterQueryError) -> str:
    """One-line text for an error shown as view content."""
    if error.details:
        return f"{error.message}: {error.details}"
    return error.message


class Navigator:
    """Owns the navigation state and turns input events into transitions.

    All gateway calls are synchronous; a slow cluster blocks the caller until
    the call returns or fails. Gateway failures never escape: they become the
    content of the view that was being entered.
    """

    def __init__(self, gateway: ResourceGateway):
        self.gateway = gateway
        self.state = NavigationState()

    @property
    def depth(self) -> Depth:
        return self.state.depth

    @property
    def context(self) -> NavigationContext:
        return self.state.context

    @property
    def session(self) -> ExecSession:
        return self.state.session

    def start(self) -> Projection:
        """Fetch the namespace list and show it."""
        logger.debug("Starting navigation at namespaces")
        self._enter(Depth.NAMESPACES)
        return self.view()

    def view(self) -> Projection:
        return project(
            self.state.depth, self.state.listing, self.state.context, self.state.session.command
        )

    def handle(self, event: NavEvent, item: ListItem | None = None) -> Projection:
        """Apply one input event and return the resulting view."""
        if event is NavEvent.SELECT:
            self.select(item)
        elif event is NavEvent.BACK:
            self.back()
        elif event is NavEvent.EXEC_REQUESTED:
            self.request_exec(item)
        return self.view()

    def select(self, item: ListItem | None) -> None:
        """Descend into the selected entry, run the command, or leave the output view."""
        depth = self.state.depth

        if depth is Depth.EXEC_INPUT:
            self._run_exec()
            return
        if depth is Depth.EXEC_OUTPUT:
            self.state.session = ExecSession()
            self._enter(Depth.CONTAINERS)
            return
        if item is None:
            return
        if depth is Depth.LOGS:
            self.state.current_log = item.text
            return
        if item.is_error:
            logger.debug(f"Ignoring selection of error entry at {depth.label}")
            return

        field, target = _SELECT_TARGETS[depth]
        setattr(self.state.context, field, item.text)
        self._enter(target)

    def request_exec(self, item: ListItem | None) -> None:
        """Start the exec detour for the selected container."""
        if self.state.depth is not Depth.CONTAINERS:
            return
        if item is None or item.is_error:
            return

        self.state.context.container = item.text
        self.state.session = ExecSession()
        self.state.depth = Depth.EXEC_INPUT
        self.state.listing = ListingResult(title=Depth.EXEC_INPUT.label)
        logger.debug(f"Exec requested for container {item.text}")

    def back(self) -> None:
        """Go up one level; from either exec view go straight back to the container list."""
        depth = self.state.depth
        if depth is Depth.NAMESPACES:
            return
        if depth.is_exec:
            self.state.session = ExecSession()
        self._enter(_BACK_TARGETS[depth])

    def edit_command(self, text: str) -> None:
        """Replace the command text; ignored outside the command input view."""
        if self.state.depth is Depth.EXEC_INPUT:
            self.state.session.command = text

    def _enter(self, depth: Depth) -> None:
        self.state.listing = self._fetch(depth)
        self.state.depth = depth
        self.state.current_log = ""

    def _fetch(self, depth: Depth) -> ListingResult:
        try:
            items = _LISTINGS[depth](self.gateway, self.state.context)
        except ClusterQueryError as e:
            logger.warning(f"Could not load {depth.label.lower()}: {error_text(e)}")
            return ListingResult.from_error(depth.label, error_text(e))
        return ListingResult(title=depth.label, items=items)

    def _run_exec(self) -> None:
        session = self.state.session
        ctx = self.state.context

        result = self.gateway.exec(session.command, ctx.container, ctx.pod, ctx.namespace)
        session.stdout = result.stdout
        session.stderr = result.stderr
        if result.stderr:
            logger.warning(f"Exec stderr from {ctx.pod}/{ctx.container}: {result.stderr}")

        if result.ok:
            session.error = None
            listing = ListingResult.from_labels(
                Depth.EXEC_OUTPUT.label, split_output(result.stdout)
            )
        else:
            session.error = EXEC_ERROR_TEMPLATE.format(
                pod=ctx.pod,
                container=ctx.container,
                namespace=ctx.namespace,
                command=session.command,
                error=result.error,
            )
            listing = ListingResult.from_error(Depth.EXEC_OUTPUT.label, session.error)

        self.state.listing = listing
        self.state.depth = Depth.EXEC_OUTPUT
