"""TUI module for browsing cluster resources."""

from kubenav.config import BrowserSettings
from kubenav.exceptions import KubenavError
from kubenav.tui.app import BrowserTUI

__all__ = ["BrowserTUI", "launch"]


def launch(settings: BrowserSettings) -> None:
    """Connect to the cluster and run the browser until the user quits.

    Raises:
        ConnectionSetupError: If no cluster configuration could be loaded.
        KubenavError: If the terminal UI exits with an error.
    """
    from kubenav.connection import connect
    from kubenav.gateway import KubernetesGateway

    api_client = connect(settings)
    app = BrowserTUI(KubernetesGateway(api_client), command_char_limit=settings.command_char_limit)
    app.run()

    if app.return_code:
        raise KubenavError(
            "Terminal UI exited with an error", f"Return code: {app.return_code}"
        )
