"""Pytest configuration and shared fixtures."""

import os

import pytest
from hypothesis import Verbosity, settings

from kubenav.gateway import ResourceGateway
from kubenav.models import ExecResult, ListItem

# Configure Hypothesis for property-based testing
settings.register_profile("default", max_examples=100, verbosity=Verbosity.normal)
settings.register_profile("ci", max_examples=1000, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=10, verbosity=Verbosity.verbose)

# Load the default profile
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "default"))


SAMPLE_TREE = {
    "default": {"web-0": ["nginx", "sidecar"], "web-1": ["nginx"]},
    "kube-system": {"coredns-5d78c9869d-abcde": ["coredns"]},
}


class FakeGateway(ResourceGateway):
    """In-memory gateway: a namespace -> pod -> containers tree plus canned logs."""

    def __init__(self, tree=None, logs=None, exec_result=None):
        self.tree = SAMPLE_TREE if tree is None else tree
        self.logs = logs or {}
        self.exec_result = exec_result or ExecResult(stdout="hi")
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple] = []

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.failures:
            raise self.failures[name]

    def list_namespaces(self) -> list[ListItem]:
        self._record("list_namespaces")
        return [ListItem.label(ns) for ns in self.tree]

    def list_pods(self, namespace: str) -> list[ListItem]:
        self._record("list_pods", namespace)
        return [ListItem.label(pod) for pod in self.tree.get(namespace, {})]

    def list_containers(self, namespace: str, pod: str) -> list[ListItem]:
        self._record("list_containers", namespace, pod)
        return [ListItem.label(c) for c in self.tree.get(namespace, {}).get(pod, [])]

    def fetch_logs(self, namespace: str, pod: str, container: str) -> list[ListItem]:
        self._record("fetch_logs", namespace, pod, container)
        return [ListItem.label(line) for line in self.logs.get((namespace, pod, container), [])]

    def exec(self, command, container, pod, namespace, stdin=None) -> ExecResult:
        self._record("exec", command, container, pod, namespace)
        return self.exec_result

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


@pytest.fixture(scope="session")
def gateway_factory():
    """The FakeGateway class, usable from Hypothesis tests."""
    return FakeGateway


@pytest.fixture
def gateway():
    """Fake gateway over the sample tree."""
    return FakeGateway(
        logs={("default", "web-0", "nginx"): ["GET / 200", "GET /healthz 200"]},
    )
