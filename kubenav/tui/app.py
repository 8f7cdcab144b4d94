"""Main TUI application for browsing cluster resources."""

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header, Input, OptionList, Static

from kubenav.gateway import ResourceGateway
from kubenav.logging_config import get_logger
from kubenav.models import Depth, ListItem, NavEvent, Projection
from kubenav.navigator import Navigator
from kubenav.projection import help_line, key_for, translate_key

logger = get_logger(__name__)


class BrowserTUI(App):
    """Terminal UI for drilling from namespaces down to container logs."""

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-container {
        height: 100%;
        margin: 0 1;
    }

    #list-title {
        background: $primary;
        color: $text;
        padding: 0 1;
        width: auto;
    }

    #items {
        height: 1fr;
        border: solid $primary;
    }

    #detail {
        height: 6;
        border: round $secondary;
        padding: 1;
        display: none;
    }

    #filter, #command {
        display: none;
    }

    #keys {
        color: $text-muted;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("slash", "filter", "Filter"),
        Binding("T", "toggle_title", "Toggle title"),
        Binding("S", "toggle_status", "Toggle status"),
        Binding("H", "toggle_help", "Toggle help"),
        Binding(key_for(NavEvent.SELECT), "nav('select')", "Select", show=False),
        Binding(key_for(NavEvent.BACK), "nav('back')", "Back", show=False, priority=True),
        Binding(key_for(NavEvent.EXEC_REQUESTED), "nav('exec_requested')", "Exec", show=False),
        Binding("escape", "cancel", "Back", show=False),
    ]

    def __init__(self, gateway: ResourceGateway, command_char_limit: int = 156):
        """Initialize the TUI.

        Args:
            gateway: Resource gateway used for every cluster call
            command_char_limit: Maximum length of the exec command input
        """
        super().__init__()
        self.navigator = Navigator(gateway)
        self.command_char_limit = command_char_limit
        self._projection: Projection | None = None
        self._visible: list[ListItem] = []
        self._filter_text: str = ""
        self._show_status = True

    def compose(self) -> ComposeResult:
        """Compose the TUI layout."""
        yield Header()
        with Vertical(id="main-container"):
            yield Static(id="list-title")
            yield Input(placeholder="Filter", id="filter")
            yield OptionList(id="items")
            yield Static(id="detail")
            yield Input(
                placeholder="Command, e.g. ls -la /",
                id="command",
                max_length=self.command_char_limit,
            )
            yield Static(id="keys")
        yield Footer()

    def on_mount(self) -> None:
        """Fetch namespaces and show the first view."""
        self.title = "kubenav"
        self._render_view(self.navigator.start())

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Only let navigation keys through where they mean something."""
        if action == "nav" and parameters:
            event = NavEvent(parameters[0])
            return translate_key(key_for(event), self.navigator.depth) is not None
        return True

    def action_nav(self, event_name: str) -> None:
        """Apply a navigation event to the highlighted entry."""
        event = NavEvent(event_name)
        item = None if self.navigator.depth is Depth.EXEC_INPUT else self._highlighted_item()
        self._apply(event, item)

    def action_cancel(self) -> None:
        """Close the filter if it is open, otherwise go back."""
        filter_input = self.query_one("#filter", Input)
        if filter_input.display:
            self._close_filter()
        else:
            self._apply(NavEvent.BACK, None)

    def action_filter(self) -> None:
        """Open the filter box above the list."""
        if self.navigator.depth is Depth.EXEC_INPUT:
            return
        filter_input = self.query_one("#filter", Input)
        filter_input.display = True
        filter_input.focus()

    def action_toggle_title(self) -> None:
        title = self.query_one("#list-title", Static)
        title.display = not title.display

    def action_toggle_status(self) -> None:
        """Show or hide the breadcrumb next to the app title."""
        self._show_status = not self._show_status
        if self._projection is not None:
            self.sub_title = self._projection.subtitle if self._show_status else ""

    def action_toggle_help(self) -> None:
        footer = self.query_one(Footer)
        keys = self.query_one("#keys", Static)
        footer.display = not footer.display
        keys.display = footer.display

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        if 0 <= event.option_index < len(self._visible):
            self._apply(NavEvent.SELECT, self._visible[event.option_index])

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        if event.input.id == "command":
            self._apply(NavEvent.SELECT, None)
        elif event.input.id == "filter":
            self.query_one("#items", OptionList).focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        if event.input.id == "command":
            self.navigator.edit_command(event.value)
            self.query_one("#list-title", Static).update(Text(self.navigator.view().title))
        elif event.input.id == "filter":
            self._filter_text = event.value
            self._show_items()

    def _apply(self, event: NavEvent, item: ListItem | None) -> None:
        logger.debug(f"{event.value} at {self.navigator.depth.label}")
        self._render_view(self.navigator.handle(event, item))

    def _highlighted_item(self) -> ListItem | None:
        index = self.query_one("#items", OptionList).highlighted
        if index is None or not 0 <= index < len(self._visible):
            return None
        return self._visible[index]

    def _render_view(self, projection: Projection) -> None:
        """Redraw from a projection; the list is rebuilt only when the projection changed."""
        depth = self.navigator.depth

        if projection != self._projection:
            self._projection = projection
            self._filter_text = ""
            filter_input = self.query_one("#filter", Input)
            filter_input.value = ""
            filter_input.display = False
            self._show_items()

        self.sub_title = projection.subtitle if self._show_status else ""
        self.query_one("#list-title", Static).update(Text(projection.title))
        self.query_one("#keys", Static).update(help_line(projection.actions, depth))

        detail = self.query_one("#detail", Static)
        detail.display = depth is Depth.LOGS
        detail.update(Text(self.navigator.state.current_log))

        command_input = self.query_one("#command", Input)
        command_input.display = depth is Depth.EXEC_INPUT
        if depth is Depth.EXEC_INPUT:
            command_input.value = self.navigator.session.command
            command_input.focus()
        else:
            command_input.value = ""
            self.query_one("#items", OptionList).focus()

    def _show_items(self) -> None:
        items = self._projection.items if self._projection else ()
        needle = self._filter_text.lower()
        self._visible = [item for item in items if needle in item.text.lower()]

        option_list = self.query_one("#items", OptionList)
        option_list.clear_options()
        option_list.add_options([_prompt(item) for item in self._visible])
        if self._visible:
            option_list.highlighted = 0

    def _close_filter(self) -> None:
        filter_input = self.query_one("#filter", Input)
        filter_input.value = ""
        filter_input.display = False
        self._filter_text = ""
        self._show_items()
        self.query_one("#items", OptionList).focus()


def _prompt(item: ListItem) -> Text:
    """Rich text for an entry; error pseudo-items are shown in red."""
    if item.is_error:
        return Text(item.text, style="bold red")
    # Blank log lines still need a visible row
    return Text(item.text or " ")
