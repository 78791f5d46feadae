"""Utility functions for CLI commands."""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console

from dyntable.config import Config, find_project_dir
from dyntable.core.engine import DynamicTables, store_from_config
from dyntable.errors import DynTableError, PartialFailureError, ValidationError
from dyntable.models import Column
from dyntable.utils.type_utils import normalize_type

console = Console()

REQUIRED_FLAGS = {"required", "req", "not_null", "notnull"}


def get_config_with_data():
    """Get config and load data from current directory.

    Returns:
        tuple: (config, config_data)
    """
    env_dir = os.environ.get("DYNTABLE_PROJECT_DIR")
    try:
        project_root = Path(env_dir) if env_dir else find_project_dir(Path.cwd())
    except FileNotFoundError:
        console.print("[red]❌ Not in a dyntable project directory[/red]")
        raise typer.Exit(1)

    config = Config(project_root)
    try:
        config_data = config.load()
    except FileNotFoundError:
        console.print("[red]❌ Config file not found. Run 'dyntable init' first.[/red]")
        raise typer.Exit(1)
    except PydanticValidationError as e:
        console.print(f"[red]❌ Invalid configuration in {config.config_path}:[/red]")
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"]) or "config"
            console.print(f"[red]   • {field}: {error['msg']}[/red]")
        console.print("[yellow]   Check config.toml and the DYNTABLE_* environment variables[/yellow]")
        raise typer.Exit(1)

    return config, config_data


def get_engine() -> DynamicTables:
    """Build an engine for the project in the current directory.

    Raises:
        typer.Exit: If configuration is invalid
    """
    config, config_data = get_config_with_data()
    try:
        store = store_from_config(config, config_data)
    except ValueError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)
    return DynamicTables(store, default_page_size=config_data.default_page_size)


def parse_column_spec(spec: str) -> Column:
    """Parse ``name:type[:required][:opt1|opt2]`` into a Column.

    Raises:
        ValueError: If the spec is malformed or the type is unknown
    """
    parts = spec.split(":")
    if len(parts) < 2 or not parts[0].strip():
        raise ValueError(
            f"Invalid column definition: '{spec}'. Format: name:type[:required][:opt1|opt2]"
        )

    name = parts[0].strip()
    col_type = normalize_type(parts[1])
    required = False
    options: Optional[List[str]] = None

    for part in parts[2:]:
        if part.strip().lower() in REQUIRED_FLAGS:
            required = True
        elif part.strip():
            options = [opt.strip() for opt in part.split("|") if opt.strip()]

    return Column(name=name, type=col_type, required=required, options=options)


def parse_json_object(data: str) -> Dict[str, Any]:
    """Parse a JSON object given on the command line.

    Raises:
        typer.Exit: If the text is not a JSON object
    """
    try:
        parsed = json.loads(data)
    except json.JSONDecodeError as e:
        console.print(f"[red]❌ Invalid JSON format: {e}[/red]")
        raise typer.Exit(1)

    if not isinstance(parsed, dict):
        console.print("[red]❌ Data must be a JSON object[/red]")
        raise typer.Exit(1)
    return parsed


def report_error(error: DynTableError) -> None:
    """Print an engine error, listing every field for validation failures."""
    if isinstance(error, ValidationError):
        console.print("[red]❌ Validation failed:[/red]")
        for field_error in error.errors:
            console.print(f"[red]   • {field_error.message}[/red]")
    elif isinstance(error, PartialFailureError):
        console.print(f"[red]❌ {error}[/red]")
        if not error.rollback_succeeded:
            console.print("[yellow]   Run 'dyntable table repair' to find incomplete tables[/yellow]")
    else:
        console.print(f"[red]❌ {error}[/red]")


def show_env_config():
    """Display active environment variable configuration."""
    env_vars = {
        "DYNTABLE_PROJECT_DIR": os.environ.get("DYNTABLE_PROJECT_DIR"),
        "DYNTABLE_BACKEND": os.environ.get("DYNTABLE_BACKEND"),
        "DYNTABLE_PAGE_SIZE": os.environ.get("DYNTABLE_PAGE_SIZE"),
        "DYNTABLE_REST_URL": os.environ.get("DYNTABLE_REST_URL"),
        "DYNTABLE_API_KEY": "***" if "DYNTABLE_API_KEY" in os.environ else None,
    }

    active = {k: v for k, v in env_vars.items() if v}
    if active:
        console.print("\n[yellow]Active environment variables:[/yellow]")
        for key, value in active.items():
            console.print(f"  {key}={value}")
    else:
        console.print("\n[dim]No dyntable environment variables set[/dim]")
