"""Interactive terminal browser for Kubernetes namespaces, pods, containers and logs."""

__version__ = "0.1.0"
