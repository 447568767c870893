"""Command-line interface for the Herald runtime."""

from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core.manager import get_robot_manager
from .core.registry import get_plugin_registry
from .exceptions import ConfigurationError
from .models.config import get_settings

app = typer.Typer(
    name="herald",
    help="Herald chat-automation runtime",
    add_completion=False,
)
console = Console()


def print_error(message: str):
    """Print an error message."""
    console.print(
        Panel(
            f"[red]{message}[/red]",
            title="[bold red]Error[/bold red]",
            border_style="red",
        )
    )


@app.command()
def version():
    """Show version information."""
    from . import __version__

    console.print(f"Herald v{__version__}")


@app.command()
def config():
    """Show current configuration."""
    settings = get_settings()

    table = Table(title="Configuration", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Environment", settings.env)
    table.add_row("Config Path", settings.config_path)
    table.add_row("Robot Name", settings.robot_name)
    table.add_row("Adapter", settings.adapter)
    table.add_row("Log Level", settings.log_level)
    table.add_row("Admins", str(len(settings.admins)))
    table.add_row("Store Backend", settings.store_backend)

    console.print(table)


@app.command()
def start(
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to the configuration file"
    ),
):
    """Load the configuration file and run the robots it defines."""
    try:
        get_robot_manager().run(config)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command()
def plugins():
    """List registered adapters and handlers."""
    registry = get_plugin_registry()

    table = Table(title="Registered Plugins", show_header=True)
    table.add_column("Kind", style="cyan")
    table.add_column("Key", style="green")
    table.add_column("Class", style="white")

    for key, adapter in sorted(registry.adapters().items()):
        table.add_row("adapter", key, f"{adapter.__module__}.{adapter.__qualname__}")
    for handler in sorted(registry.handlers(), key=lambda cls: cls.handler_namespace()):
        table.add_row("handler", handler.handler_namespace(), f"{handler.__module__}.{handler.__qualname__}")

    console.print(table)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
