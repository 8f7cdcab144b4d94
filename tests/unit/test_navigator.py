"""Unit tests for the navigation state machine."""

from unittest.mock import Mock

from kubernetes.config.config_exception import ConfigException

from kubenav.exceptions import ClusterQueryError
from kubenav.gateway import KubernetesGateway
from kubenav.models import Depth, ExecResult, ExecSession, ItemKind, ListItem, NavEvent
from kubenav.navigator import Navigator


def _descend_to_containers(nav: Navigator) -> None:
    nav.start()
    nav.select(ListItem.label("default"))
    nav.select(ListItem.label("web-0"))


def test_start_fetches_namespaces(gateway):
    """Test that starting eagerly loads the namespace list."""
    nav = Navigator(gateway)
    view = nav.start()

    assert nav.depth is Depth.NAMESPACES
    assert view.title == "Namespaces"
    assert [item.text for item in view.items] == ["default", "kube-system"]
    assert nav.context.namespace is None
    assert gateway.count("list_namespaces") == 1


def test_select_chain_records_context(gateway):
    """Test that each select sets the context field for its depth and descends."""
    nav = Navigator(gateway)
    nav.start()

    nav.select(ListItem.label("default"))
    assert nav.depth is Depth.PODS
    assert nav.context.namespace == "default"

    nav.select(ListItem.label("web-0"))
    assert nav.depth is Depth.CONTAINERS
    assert nav.context.pod == "web-0"
    assert nav.state.listing.labels == ["nginx", "sidecar"]

    nav.select(ListItem.label("nginx"))
    assert nav.depth is Depth.LOGS
    assert nav.context.container == "nginx"
    assert nav.state.listing.labels == ["GET / 200", "GET /healthz 200"]
    assert ("fetch_logs", "default", "web-0", "nginx") in gateway.calls


def test_select_at_logs_records_current_log(gateway):
    """Test that selecting a log line only records it."""
    nav = Navigator(gateway)
    _descend_to_containers(nav)
    nav.select(ListItem.label("nginx"))
    calls_before = len(gateway.calls)

    nav.select(ListItem.label("GET /healthz 200"))

    assert nav.depth is Depth.LOGS
    assert nav.state.current_log == "GET /healthz 200"
    assert len(gateway.calls) == calls_before


def test_back_from_namespaces_is_noop(gateway):
    """Test that back at the top level changes nothing."""
    nav = Navigator(gateway)
    nav.start()
    before = nav.state.model_copy(deep=True)

    nav.back()

    assert nav.state == before
    assert gateway.count("list_namespaces") == 1


def test_back_refetches_and_keeps_context(gateway):
    """Test that back re-fetches live data and never clears selections."""
    nav = Navigator(gateway)
    _descend_to_containers(nav)
    nav.select(ListItem.label("nginx"))

    nav.back()
    assert nav.depth is Depth.CONTAINERS
    assert nav.context.container == "nginx"
    assert gateway.count("list_containers") == 2

    nav.back()
    assert nav.depth is Depth.PODS
    assert nav.context.pod == "web-0"

    nav.back()
    assert nav.depth is Depth.NAMESPACES
    assert nav.context.namespace == "default"
    assert gateway.count("list_namespaces") == 2


def test_empty_log_then_back(gateway):
    """Test that an empty log renders no items and back returns to containers."""
    nav = Navigator(gateway)
    _descend_to_containers(nav)

    view = nav.handle(NavEvent.SELECT, ListItem.label("sidecar"))
    assert nav.depth is Depth.LOGS
    assert view.items == ()

    nav.back()
    assert nav.depth is Depth.CONTAINERS
    assert nav.context.container == "sidecar"


def test_exec_requested_enters_command_input(gateway):
    """Test that exec on a container starts a clean session without fetching."""
    nav = Navigator(gateway)
    _descend_to_containers(nav)
    calls_before = len(gateway.calls)

    nav.handle(NavEvent.EXEC_REQUESTED, ListItem.label("nginx"))

    assert nav.depth is Depth.EXEC_INPUT
    assert nav.context.container == "nginx"
    assert nav.session == ExecSession()
    assert len(gateway.calls) == calls_before


def test_exec_requested_outside_containers_is_ignored(gateway):
    """Test that exec is only available from the container list."""
    nav = Navigator(gateway)
    nav.start()

    nav.request_exec(ListItem.label("default"))

    assert nav.depth is Depth.NAMESPACES
    assert nav.context.container is None


def test_exec_runs_command_and_shows_output(gateway):
    """Test the full exec flow: command entry, run, output lines."""
    nav = Navigator(gateway)
    _descend_to_containers(nav)
    nav.request_exec(ListItem.label("nginx"))

    nav.edit_command("echo hi")
    nav.select(None)
    view = nav.view()

    assert ("exec", "echo hi", "nginx", "web-0", "default") in gateway.calls
    assert nav.depth is Depth.EXEC_OUTPUT
    assert [item.text for item in view.items] == ["hi"]
    assert nav.session.stdout == "hi"
    assert nav.session.error is None


def test_exec_output_keeps_trailing_empty_line(gateway):
    """Test that output ending in a newline splits literally."""
    gateway.exec_result = ExecResult(stdout="hi\n")
    nav = Navigator(gateway)
    _descend_to_containers(nav)
    nav.request_exec(ListItem.label("nginx"))
    nav.edit_command("echo hi")

    nav.select(None)

    assert nav.state.listing.labels == ["hi", ""]


def test_exec_output_normalizes_crlf(gateway):
    """Test that CRLF output is split into clean lines."""
    gateway.exec_result = ExecResult(stdout="a\r\nb\r\nc")
    nav = Navigator(gateway)
    _descend_to_containers(nav)
    nav.request_exec(ListItem.label("nginx"))
    nav.edit_command("cat file")

    nav.select(None)

    assert nav.state.listing.labels == ["a", "b", "c"]


def test_exec_error_is_shown_and_output_preserved(gateway):
    """Test that a failed exec shows a formatted error and keeps captured output."""
    gateway.exec_result = ExecResult(
        stdout="partial", stderr="sh: boom", error="command terminated with exit code 2"
    )
    nav = Navigator(gateway)
    _descend_to_containers(nav)
    nav.request_exec(ListItem.label("nginx"))
    nav.edit_command("sh -c boom")

    view = nav.handle(NavEvent.SELECT)

    assert nav.depth is Depth.EXEC_OUTPUT
    assert len(view.items) == 1
    assert view.items[0].kind is ItemKind.ERROR_PLACEHOLDER
    assert "'web-0'" in view.items[0].text
    assert "'nginx'" in view.items[0].text
    assert "'sh -c boom'" in view.items[0].text
    assert "exit code 2" in view.items[0].text
    assert nav.session.error == view.items[0].text
    assert nav.session.stdout == "partial"
    assert nav.session.stderr == "sh: boom"


def test_select_on_exec_output_returns_to_containers(gateway):
    """Test that enter on the output view refreshes the container list and ends the session."""
    nav = Navigator(gateway)
    _descend_to_containers(nav)
    nav.request_exec(ListItem.label("nginx"))
    nav.edit_command("echo hi")
    nav.select(None)
    containers_fetched = gateway.count("list_containers")

    nav.select(ListItem.label("hi"))

    assert nav.depth is Depth.CONTAINERS
    assert gateway.count("list_containers") == containers_fetched + 1
    assert nav.session == ExecSession()


def test_back_from_exec_views_clears_session(gateway):
    """Test that back from either exec view lands on containers with an empty session."""
    nav = Navigator(gateway)
    _descend_to_containers(nav)

    nav.request_exec(ListItem.label("nginx"))
    nav.edit_command("ls")
    nav.back()
    assert nav.depth is Depth.CONTAINERS
    assert nav.session == ExecSession()

    nav.request_exec(ListItem.label("nginx"))
    nav.edit_command("ls")
    nav.select(None)
    assert nav.depth is Depth.EXEC_OUTPUT
    nav.back()
    assert nav.depth is Depth.CONTAINERS
    assert nav.session == ExecSession()


def test_edit_command_ignored_outside_command_input(gateway):
    """Test that text edits only reach the session while entering a command."""
    nav = Navigator(gateway)
    nav.start()

    nav.edit_command("rm -rf /")

    assert nav.session.command == ""


def test_container_listing_error_is_single_item(gateway):
    """Test that a failed container listing shows exactly the error text."""
    gateway.failures["list_containers"] = ClusterQueryError('pods "p" not found')
    nav = Navigator(gateway)
    nav.start()
    nav.select(ListItem.label("n"))

    view = nav.handle(NavEvent.SELECT, ListItem.label("p"))

    assert nav.depth is Depth.CONTAINERS
    assert [item.text for item in view.items] == ['pods "p" not found']
    assert view.items[0].is_error
    assert nav.context.container is None


def test_selecting_error_item_does_not_descend(gateway):
    """Test that an error pseudo-item is not treated as a resource name."""
    nav = Navigator(gateway)
    _descend_to_containers(nav)
    error_item = ListItem.error('pods "p" not found')

    nav.select(error_item)
    nav.request_exec(error_item)

    assert nav.depth is Depth.CONTAINERS
    assert nav.context.container is None


def test_query_error_becomes_view_content(gateway):
    """Test that listing errors are rendered at the target depth instead of raised."""
    gateway.failures["list_pods"] = ClusterQueryError("Failed to list pods", "connection refused")
    nav = Navigator(gateway)
    nav.start()

    view = nav.handle(NavEvent.SELECT, ListItem.label("default"))

    assert nav.depth is Depth.PODS
    assert view.title == "Pods"
    assert [item.text for item in view.items] == ["Failed to list pods: connection refused"]

    # No automatic retry; navigating again re-triggers the call
    del gateway.failures["list_pods"]
    nav.back()
    nav.select(ListItem.label("default"))
    assert nav.state.listing.labels == ["web-0", "web-1"]
    assert gateway.count("list_pods") == 2


def test_startup_namespace_error_is_rendered(gateway):
    """Test that a failing namespace list at startup is shown, not raised."""
    gateway.failures["list_namespaces"] = ClusterQueryError("Failed to list namespaces", "403")
    nav = Navigator(gateway)

    view = nav.start()

    assert nav.depth is Depth.NAMESPACES
    assert len(view.items) == 1
    assert view.items[0].is_error


def test_credential_refresh_failure_shown_as_error_item():
    """Test that a failed token refresh while listing pods stays inside the view."""
    namespace = Mock()
    namespace.metadata.name = "default"
    api = Mock()
    api.list_namespace.return_value.items = [namespace]
    api.list_namespaced_pod.side_effect = ConfigException("exec plugin: token expired")
    nav = Navigator(KubernetesGateway(api))

    nav.start()
    view = nav.handle(NavEvent.SELECT, ListItem.label("default"))

    assert nav.depth is Depth.PODS
    assert len(view.items) == 1
    assert view.items[0].kind is ItemKind.ERROR_PLACEHOLDER
    assert "exec plugin: token expired" in view.items[0].text
