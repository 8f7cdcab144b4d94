"""Cluster connection bootstrap."""

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from kubenav.config import BrowserSettings
from kubenav.exceptions import ConnectionSetupError
from kubenav.logging_config import get_logger

logger = get_logger(__name__)


def connect(settings: BrowserSettings) -> client.CoreV1Api:
    """
    Load cluster credentials and return an authenticated CoreV1 API client.

    An explicitly configured kubeconfig (or context) is used as-is. Otherwise the
    in-cluster service account is tried first, then the kubeconfig the client
    resolves itself (every `KUBECONFIG` entry merged, else ~/.kube/config).

    Raises:
        ConnectionSetupError: If no configuration could be loaded.
    """
    if settings.kubeconfig or settings.context:
        logger.debug(f"Loading kubeconfig {settings.kubeconfig or '(default)'}")
        try:
            config.load_kube_config(config_file=settings.kubeconfig, context=settings.context)
        except (ConfigException, OSError) as e:
            raise ConnectionSetupError(
                "Failed to load kubeconfig",
                f"Could not use {settings.kubeconfig or 'the default kubeconfig'}: {e}",
            )
        return client.CoreV1Api()

    try:
        config.load_incluster_config()
        logger.debug("Using in-cluster configuration")
    except ConfigException as in_cluster_error:
        logger.debug(f"In-cluster configuration unavailable: {in_cluster_error}")
        try:
            config.load_kube_config()
        except (ConfigException, OSError) as kubeconfig_error:
            raise ConnectionSetupError(
                "No usable cluster configuration found",
                f"In-cluster config failed: {in_cluster_error}\n"
                f"Kubeconfig failed: {kubeconfig_error}",
            )

    return client.CoreV1Api()
