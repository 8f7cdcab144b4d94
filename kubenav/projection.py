"""List projection: turns navigator state into what the list widget shows.

Everything here is pure. The same inputs always give an equal ``Projection``,
so re-rendering without a transition never changes the screen.
"""

from kubenav.models import (
    Action,
    Depth,
    ListingResult,
    NavEvent,
    NavigationContext,
    Projection,
)

AVAILABLE_ACTIONS: dict[Depth, frozenset[Action]] = {
    Depth.NAMESPACES: frozenset({Action.SELECT}),
    Depth.PODS: frozenset({Action.SELECT}),
    Depth.CONTAINERS: frozenset({Action.SELECT, Action.BACK, Action.EXEC}),
    Depth.LOGS: frozenset({Action.BACK}),
    Depth.EXEC_INPUT: frozenset({Action.SELECT, Action.BACK}),
    Depth.EXEC_OUTPUT: frozenset({Action.SELECT, Action.BACK}),
}

# Widget key -> navigator event
KEY_BINDINGS: dict[str, NavEvent] = {
    "enter": NavEvent.SELECT,
    "ctrl+h": NavEvent.BACK,
    "e": NavEvent.EXEC_REQUESTED,
}

_ACTION_HELP = {
    Action.SELECT: ("enter", "select entry"),
    Action.BACK: ("ctrl+h", "return to previous screen"),
    Action.EXEC: ("e", "run command in container"),
}

_EXEC_SELECT_HELP = {
    Depth.EXEC_INPUT: "run command",
    Depth.EXEC_OUTPUT: "return to containers",
}


def split_output(text: str) -> list[str]:
    """Split command output into lines, treating CRLF as LF.

    No trimming: ``"hi\\n"`` gives ``["hi", ""]``.
    """
    return text.replace("\r\n", "\n").split("\n")


def title_for(depth: Depth, listing: ListingResult, command: str = "") -> str:
    """Fixed per-depth title, decorated with the command text in the exec views."""
    if depth is Depth.EXEC_INPUT:
        return f"{listing.title}: {command}" if command else listing.title
    if depth is Depth.EXEC_OUTPUT:
        return f"{listing.title} of `{command}` (press enter to return to Containers)"
    return listing.title


def project(
    depth: Depth,
    listing: ListingResult,
    context: NavigationContext,
    command: str = "",
) -> Projection:
    """Build the presentation-ready view for a depth and its listing."""
    return Projection(
        title=title_for(depth, listing, command),
        subtitle=context.breadcrumb(),
        items=tuple(listing.items),
        actions=AVAILABLE_ACTIONS[depth],
    )


def translate_key(key: str, depth: Depth) -> NavEvent | None:
    """Map a widget key to a navigator event, or None to leave it to the widget.

    ``e`` only requests exec from the container list; anywhere else it is an
    ordinary key (filter text, command text).
    """
    event = KEY_BINDINGS.get(key)
    if event is NavEvent.EXEC_REQUESTED and depth is not Depth.CONTAINERS:
        return None
    return event


def key_for(event: NavEvent) -> str:
    """The widget key bound to a navigator event."""
    return next(key for key, bound in KEY_BINDINGS.items() if bound is event)


def help_line(projection_actions: frozenset[Action], depth: Depth) -> str:
    """Render the advertised key bindings, e.g. ``enter select entry • ctrl+h ...``."""
    parts = []
    for action in (Action.SELECT, Action.BACK, Action.EXEC):
        if action not in projection_actions:
            continue
        key, description = _ACTION_HELP[action]
        if action is Action.SELECT and depth in _EXEC_SELECT_HELP:
            description = _EXEC_SELECT_HELP[depth]
        parts.append(f"{key} {description}")
    return " • ".join(parts)
