"""Resource gateway: the synchronous facade every cluster call goes through."""

import json
from abc import ABC, abstractmethod
from collections.abc import Callable
from contextlib import closing
from enum import Enum

import yaml
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException
from kubernetes.stream import stream
from kubernetes.stream.ws_client import ERROR_CHANNEL, STDIN_CHANNEL
from urllib3.exceptions import HTTPError

from kubenav.exceptions import ClusterExecError, ClusterQueryError
from kubenav.logging_config import get_logger
from kubenav.models import ExecResult, ListItem

logger = get_logger(__name__)

# Errors the client raises for API failures, credential refreshes and broken transports
QUERY_ERRORS = (ApiException, ConfigException, HTTPError, OSError)


class ListingKind(str, Enum):
    """Listing calls the gateway exposes."""

    NAMESPACES = "namespaces"
    PODS = "pods"
    CONTAINERS = "containers"
    LOGS = "logs"


# Whether a failed listing becomes a single error pseudo-item instead of raising.
DEGRADE_TO_PSEUDO_ITEM: dict[ListingKind, bool] = {
    ListingKind.NAMESPACES: False,
    ListingKind.PODS: False,
    ListingKind.CONTAINERS: True,
    ListingKind.LOGS: False,
}


def describe_api_error(error: Exception) -> str:
    """Short, human-readable text for a client error.

    For API errors the server's ``message`` field is preferred, e.g.
    ``pods "web-0" not found``.
    """
    if isinstance(error, ApiException):
        if error.body:
            try:
                body = json.loads(error.body)
            except (TypeError, ValueError):
                body = None
            if isinstance(body, dict) and body.get("message"):
                return body["message"]
        if error.status:
            return f"{error.status} {error.reason}"
        return str(error.reason)
    return str(error)


def split_log_text(body: bytes | str) -> list[str]:
    """Split a raw log body into lines on ``\\n``; an empty body has no lines."""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if not body:
        return []
    return body.split("\n")


class ResourceGateway(ABC):
    """Read and exec operations the navigator needs from the cluster."""

    @abstractmethod
    def list_namespaces(self) -> list[ListItem]:
        """Namespace names in the order the API returns them."""

    @abstractmethod
    def list_pods(self, namespace: str) -> list[ListItem]:
        """Pod names within a namespace."""

    @abstractmethod
    def list_containers(self, namespace: str, pod: str) -> list[ListItem]:
        """Container names declared in the pod spec."""

    @abstractmethod
    def fetch_logs(self, namespace: str, pod: str, container: str) -> list[ListItem]:
        """Full log content of a container, one item per line."""

    @abstractmethod
    def exec(
        self,
        command: str,
        container: str,
        pod: str,
        namespace: str,
        stdin: str | None = None,
    ) -> ExecResult:
        """Run a command in a container and capture its output. Never raises."""


class KubernetesGateway(ResourceGateway):
    """Resource gateway backed by the official Kubernetes client."""

    def __init__(self, api_client):
        """Initialize the gateway.

        Args:
            api_client: An authenticated ``kubernetes.client.CoreV1Api``
        """
        self.api = api_client

    def _listing(self, kind: ListingKind, fetch: Callable[[], list[str]]) -> list[ListItem]:
        """Run a listing call and apply the pseudo-item policy for its kind."""
        try:
            labels = fetch()
        except Exception as e:
            message = describe_api_error(e)
            # Anything outside the known client errors gets a traceback in the log
            unexpected = not isinstance(e, QUERY_ERRORS)
            if DEGRADE_TO_PSEUDO_ITEM[kind]:
                logger.warning(
                    f"Listing {kind.value} failed, showing error as item: {message}",
                    exc_info=unexpected,
                )
                return [ListItem.error(message)]
            logger.error(f"Listing {kind.value} failed: {message}", exc_info=unexpected)
            raise ClusterQueryError(f"Failed to list {kind.value}", message) from e

        logger.debug(f"Fetched {len(labels)} {kind.value}")
        return [ListItem.label(label) for label in labels]

    def list_namespaces(self) -> list[ListItem]:
        def fetch() -> list[str]:
            response = self.api.list_namespace()
            return [ns.metadata.name for ns in response.items]

        return self._listing(ListingKind.NAMESPACES, fetch)

    def list_pods(self, namespace: str) -> list[ListItem]:
        def fetch() -> list[str]:
            response = self.api.list_namespaced_pod(namespace)
            return [pod.metadata.name for pod in response.items]

        return self._listing(ListingKind.PODS, fetch)

    def list_containers(self, namespace: str, pod: str) -> list[ListItem]:
        def fetch() -> list[str]:
            response = self.api.read_namespaced_pod(name=pod, namespace=namespace)
            return [container.name for container in response.spec.containers or []]

        return self._listing(ListingKind.CONTAINERS, fetch)

    def fetch_logs(self, namespace: str, pod: str, container: str) -> list[ListItem]:
        """Read the whole log stream of a container.

        An empty container name lets the API pick the default container, which
        only works for single-container pods. The stream is closed on every exit
        path, including read errors.
        """
        options = {"container": container} if container else {}

        def fetch() -> list[str]:
            response = self.api.read_namespaced_pod_log(
                name=pod, namespace=namespace, _preload_content=False, **options
            )
            with closing(response) as log_stream:
                body = log_stream.read()
            return split_log_text(body)

        return self._listing(ListingKind.LOGS, fetch)

    def exec(
        self,
        command: str,
        container: str,
        pod: str,
        namespace: str,
        stdin: str | None = None,
    ) -> ExecResult:
        """Run ``command`` non-interactively in a container.

        The command is split on whitespace into an argument vector. Output
        captured before a failure is returned together with the error.
        """
        argv = command.split()
        if not argv:
            return ExecResult(error="no command given")

        stdout: list[str] = []
        stderr: list[str] = []
        error = None

        logger.debug(f"Exec in {namespace}/{pod}/{container}: {argv}")
        try:
            self._stream_exec(argv, container, pod, namespace, stdin, stdout, stderr)
        except ClusterExecError as e:
            error = e.format_message()
        except Exception as e:
            logger.error(f"Exec stream failed in pod {pod}: {e}", exc_info=True)
            error = f"error in stream: {describe_api_error(e)}"

        result = ExecResult(stdout="".join(stdout), stderr="".join(stderr), error=error)
        if result.ok:
            logger.debug(f"Exec completed, {len(result.stdout)} bytes of stdout")
        else:
            logger.warning(f"Exec failed in pod {pod}: {result.error}")
        return result

    def _stream_exec(
        self,
        argv: list[str],
        container: str,
        pod: str,
        namespace: str,
        stdin: str | None,
        stdout: list[str],
        stderr: list[str],
    ) -> None:
        """Pump one exec websocket until the remote process exits."""
        ws = stream(
            self.api.connect_get_namespaced_pod_exec,
            pod,
            namespace,
            container=container,
            command=argv,
            stdin=stdin is not None,
            stdout=True,
            stderr=True,
            tty=False,
            _preload_content=False,
        )
        try:
            if stdin is not None:
                ws.write_stdin(stdin)
                # EOF for processes that read stdin to the end; a no-op before the v5 protocol
                ws.close_channel(STDIN_CHANNEL)

            while ws.is_open():
                ws.update(timeout=1)
                if ws.peek_stdout():
                    stdout.append(ws.read_stdout())
                if ws.peek_stderr():
                    stderr.append(ws.read_stderr())

            # Drain anything that arrived with the close frame
            for chunk, sink in ((ws.read_stdout(), stdout), (ws.read_stderr(), stderr)):
                if chunk:
                    sink.append(chunk)

            status = ws.read_channel(ERROR_CHANNEL)
        finally:
            ws.close()

        failure = exec_failure(status)
        if failure:
            raise ClusterExecError(failure)


def exec_failure(raw_status: str | bytes | None) -> str | None:
    """Error text for the status an exec reports on its error channel.

    The server sends a ``Status`` object once the process has exited. An empty
    channel or ``status: Success`` means the command succeeded. A failure with
    a numeric ``ExitCode`` cause is a non-zero exit; any other failure, such as
    an executable that does not exist or a container that is not running, is
    reported with the server's message.
    """
    if not raw_status:
        return None
    try:
        status = yaml.safe_load(raw_status)
    except yaml.YAMLError:
        return f"unreadable exec status: {raw_status!r}"
    if not status:
        return None
    if not isinstance(status, dict):
        return f"unexpected exec status: {status!r}"
    if status.get("status", "Success") == "Success":
        return None

    causes = (status.get("details") or {}).get("causes") or []
    for cause in causes:
        if cause.get("reason", "ExitCode") != "ExitCode":
            continue
        try:
            exit_code = int(cause.get("message"))
        except (TypeError, ValueError):
            continue
        return f"command terminated with exit code {exit_code}"

    return status.get("message") or status.get("reason") or "command failed"
