"""Main CLI entry point for kubenav."""

from pathlib import Path

import typer
from rich.console import Console

from kubenav.exceptions import ConfigurationError, ConnectionSetupError, KubenavError
from kubenav.logging_config import get_logger, setup_logging

app = typer.Typer(
    name="kubenav",
    help="Browse Kubernetes namespaces, pods, containers and logs from the terminal",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


# Global callback to set up logging
@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_file: str | None = typer.Option(None, "--log-file", help="Path to log file"),
):
    """Global options for all commands."""
    ctx.obj = {"verbose": verbose, "log_file": log_file}
    log_path = Path(log_file) if log_file else None
    setup_logging(verbose=verbose, log_file=log_path)
    logger.debug("Logging initialized")


@app.command()
def version() -> None:
    """Show version information."""
    from kubenav import __version__

    typer.echo(f"kubenav version {__version__}")


@app.command()
def browse(
    ctx: typer.Context,
    kubeconfig: str | None = typer.Option(
        None, "--kubeconfig", "-k", help="Path to the kubeconfig file"
    ),
    context: str | None = typer.Option(None, "--context", "-c", help="Kubeconfig context to use"),
    config_path: str | None = typer.Option(
        None, "--config", help="Path to a kubenav settings file (YAML)"
    ),
) -> None:
    """
    Open the interactive browser.

    Start at the namespace list and drill down with enter: namespaces, pods,
    containers, then logs. Press ctrl+h to go back and e on a container to run
    a command inside it.

    Examples:
        # Use the default kubeconfig
        kubenav browse

        # Use a specific kubeconfig and context
        kubenav browse --kubeconfig ~/.kube/staging --context staging
    """
    from kubenav.config import load_settings
    from kubenav.tui import launch

    options = ctx.obj or {}

    try:
        settings = load_settings(config_path).with_overrides(
            kubeconfig=kubeconfig,
            context=context,
            log_file=options.get("log_file"),
            verbose=options.get("verbose") or None,
        )

        # The TUI owns the terminal, so log to the file only
        log_path = Path(settings.log_file) if settings.log_file else None
        setup_logging(
            level=settings.log_level, log_file=log_path, verbose=settings.verbose, console=False
        )

        launch(settings)

    except ConfigurationError as e:
        console.print(f"[red]Configuration Error:[/red] {e.message}")
        if e.details:
            console.print(f"\n{e.details}")
        raise typer.Exit(code=1)
    except ConnectionSetupError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        if e.details:
            console.print(f"\n{e.details}")
        console.print("\nMake sure:")
        console.print("  1. A kubeconfig is available at ~/.kube/config or via --kubeconfig")
        console.print("  2. The selected context points at a reachable cluster")
        raise typer.Exit(code=1)
    except KubenavError as e:
        console.print(f"[red]Error running program:[/red] {e.message}")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
