"""Main CLI entry point for dyntable."""

import logging
import typer
from typing import Optional
from pathlib import Path

# Import command groups
from dyntable.cli.commands import table, row

app = typer.Typer(
    name="dyntable",
    help="dyntable - runtime-defined tables over a schema-less store",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """
    dyntable - runtime-defined tables over a schema-less store
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] [%(name)s]: %(message)s",
        )

    if ctx.invoked_subcommand is None:
        # No subcommand was invoked, show help
        print(ctx.get_help())
        raise typer.Exit(0)


# Add command groups
app.add_typer(table.app, name="table", help="Table definition commands")
app.add_typer(row.app, name="row", help="Row commands")


@app.command()
def init(
    path: Optional[Path] = typer.Argument(
        None, help="Directory to initialize project in (default: current directory)"
    ),
    backend: str = typer.Option(
        "sqlite", "--backend", "-b", help="Backing store (sqlite, rest)"
    ),
    url: Optional[str] = typer.Option(None, "--url", help="REST backend URL"),
    key: Optional[str] = typer.Option(None, "--key", help="REST backend API key"),
):
    """Initialize a new dyntable project and create its collections."""
    from dyntable.config import RestConfig
    from dyntable.core.initializer import init_project

    project_path = path or Path.cwd()

    if backend not in ("sqlite", "rest"):
        typer.secho(f"❌ Unknown backend '{backend}'", fg=typer.colors.RED)
        raise typer.Exit(1)

    rest = None
    if backend == "rest":
        if not url or not key:
            typer.secho("❌ The rest backend needs --url and --key", fg=typer.colors.RED)
            raise typer.Exit(1)
        rest = RestConfig(url=url.rstrip("/"), key=key)

    try:
        init_project(project_dir=project_path, backend=backend, rest=rest)
        typer.secho(
            f"✅ Initialized dyntable project in {project_path}", fg=typer.colors.GREEN
        )
        typer.secho(f"   Backend: {backend}", fg=typer.colors.CYAN)
    except FileExistsError:
        typer.secho(f"❌ Project already exists in {project_path}", fg=typer.colors.RED)
        raise typer.Exit(1)


@app.command()
def version():
    """Show dyntable version."""
    from dyntable import __version__

    typer.echo(f"dyntable version {__version__}")


@app.command()
def status():
    """Show dyntable status including configuration and environment variables."""
    from dyntable.cli.utils import get_config_with_data, show_env_config
    from rich.console import Console

    console = Console()

    config, config_data = get_config_with_data()

    console.print("\n[bold]dyntable Status[/bold]")
    console.print(f"Project: {config.project_dir}")
    console.print(f"Backend: {config_data.backend}")
    if config_data.backend == "sqlite":
        console.print(f"  File: {config.sqlite_path(config_data)}")
    elif config_data.rest:
        console.print(f"  URL: {config_data.rest.url}")
        key = config_data.rest.key
        console.print(f"  Key: ***{key[-8:] if len(key) > 8 else '*' * len(key)}")
    console.print(f"Default page size: {config_data.default_page_size}")

    # Show environment variables
    show_env_config()


if __name__ == "__main__":
    app()
