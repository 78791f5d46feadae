"""Row commands for dyntable CLI."""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table as RichTable

from dyntable.cli.utils import get_engine, parse_json_object, report_error
from dyntable.errors import DynTableError

app = typer.Typer(help="Row commands", invoke_without_command=True)
console = Console()


@app.callback()
def callback(ctx: typer.Context):
    """Show help when no subcommand is provided."""
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


@app.command(name="list")
def list_rows(
    table_id: str = typer.Argument(..., help="Table id"),
    page: int = typer.Option(1, "--page", "-p", help="Page number (1-based)"),
    page_size: Optional[int] = typer.Option(None, "--page-size", "-s", help="Rows per page"),
    format: str = typer.Option("table", "--format", "-f", help="Output format (table, json)"),
):
    """List rows of a table, newest first."""
    with get_engine() as engine:
        try:
            table = engine.get_table(table_id)
            result = engine.list_rows(table_id, page=page, page_size=page_size)
        except DynTableError as e:
            report_error(e)
            raise typer.Exit(1)

    if format == "json":
        typer.echo(json.dumps(result.model_dump(), indent=2, default=str))
        return

    if not result.rows:
        console.print(f"[yellow]No rows on page {result.page} (total: {result.total})[/yellow]")
        return

    # Current columns first, then any fields only older rows still carry
    headers = [col.name for col in table.columns]
    for row in result.rows:
        for key in row:
            if key != "id" and key not in headers:
                headers.append(key)

    rich_table = RichTable(
        title=f"{table.name} page {result.page}/{result.total_pages} ({result.total} rows)",
        title_justify="left",
    )
    rich_table.add_column("id", style="dim")
    for header in headers:
        rich_table.add_column(header, style="cyan")

    for row in result.rows:
        rich_table.add_row(row["id"], *[_display(row.get(header)) for header in headers])

    console.print(rich_table)


@app.command()
def get(
    table_id: str = typer.Argument(..., help="Table id"),
    row_id: str = typer.Argument(..., help="Row id"),
):
    """Show one row as JSON."""
    with get_engine() as engine:
        try:
            row = engine.get_row(table_id, row_id)
        except DynTableError as e:
            report_error(e)
            raise typer.Exit(1)

    typer.echo(json.dumps(row, indent=2, default=str))


@app.command()
def add(
    table_id: str = typer.Argument(..., help="Table id"),
    data: str = typer.Option(..., "--data", "-d", help="JSON object keyed by column name"),
):
    """Add a row to a table.

    Examples:
        dyntable row add TABLE_ID --data '{"Item": "Pen", "Qty": 3}'
    """
    values = parse_json_object(data)

    with get_engine() as engine:
        try:
            row = engine.add_row(table_id, values)
        except DynTableError as e:
            report_error(e)
            raise typer.Exit(1)

    console.print("[green]✅ Added row[/green]")
    console.print(f"[cyan]   ID: {row['id']}[/cyan]")


@app.command()
def update(
    table_id: str = typer.Argument(..., help="Table id"),
    row_id: str = typer.Argument(..., help="Row id"),
    data: str = typer.Option(..., "--data", "-d", help="JSON object with the fields to change"),
):
    """Merge new values into a row; fields not given are kept.

    Examples:
        dyntable row update TABLE_ID ROW_ID --data '{"Qty": 5}'
    """
    values = parse_json_object(data)

    with get_engine() as engine:
        try:
            engine.update_row(table_id, row_id, values)
        except DynTableError as e:
            report_error(e)
            raise typer.Exit(1)

    console.print(f"[green]✅ Updated row {row_id}[/green]")


@app.command()
def delete(
    table_id: str = typer.Argument(..., help="Table id"),
    row_id: str = typer.Argument(..., help="Row id"),
    confirm: bool = typer.Option(False, "--confirm", "-y", help="Skip confirmation prompt"),
):
    """Delete one row."""
    if not confirm:
        if not typer.confirm(f"Delete row {row_id}?"):
            console.print("Operation cancelled.")
            raise typer.Exit(0)

    with get_engine() as engine:
        try:
            engine.delete_row(table_id, row_id)
        except DynTableError as e:
            report_error(e)
            raise typer.Exit(1)

    console.print(f"[green]✅ Deleted row {row_id}[/green]")


def _display(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)
