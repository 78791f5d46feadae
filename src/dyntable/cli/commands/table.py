"""Table definition commands for dyntable CLI."""

import typer
from typing import List, Optional
from rich.console import Console
from rich.table import Table as RichTable

from dyntable.cli.utils import get_engine, parse_column_spec, report_error
from dyntable.errors import DynTableError

app = typer.Typer(help="Table definition commands", invoke_without_command=True)
console = Console()


@app.callback()
def callback(ctx: typer.Context):
    """Show help when no subcommand is provided."""
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


def _parse_columns(specs: List[str]):
    parsed = []
    for spec in specs:
        try:
            parsed.append(parse_column_spec(spec))
        except ValueError as e:
            console.print(f"[red]❌ {e}[/red]")
            raise typer.Exit(1)
    return parsed


@app.command(name="list")
def list_tables(
    public: bool = typer.Option(False, "--public", help="Only show public tables"),
):
    """List table definitions, newest first."""
    with get_engine() as engine:
        try:
            tables = engine.list_tables(public_only=public)
        except DynTableError as e:
            report_error(e)
            raise typer.Exit(1)

    if not tables:
        console.print("[yellow]No tables found[/yellow]")
        return

    table = RichTable(title="Tables", title_justify="left")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Columns", style="green")
    table.add_column("Public", style="magenta")
    table.add_column("Created", style="yellow")

    for tbl in tables:
        table.add_row(
            tbl.id,
            tbl.name,
            str(len(tbl.columns)),
            "Yes" if tbl.is_public else "No",
            tbl.created_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


@app.command()
def show(table_id: str = typer.Argument(..., help="Table id")):
    """Show a table definition and its columns."""
    with get_engine() as engine:
        try:
            table = engine.get_table(table_id)
        except DynTableError as e:
            report_error(e)
            raise typer.Exit(1)

    console.print(f"\n[bold]Table: {table.name}[/bold]")
    console.print(f"ID: {table.id}")
    if table.description:
        console.print(f"Description: {table.description}")
    console.print(f"Public: {'Yes' if table.is_public else 'No'}")

    col_table = RichTable()
    col_table.add_column("#", style="dim")
    col_table.add_column("Name", style="cyan")
    col_table.add_column("Type", style="green")
    col_table.add_column("Required", style="yellow")
    col_table.add_column("Options", style="blue")

    for col in table.columns:
        col_table.add_row(
            str(col.order),
            col.name,
            col.type,
            "Yes" if col.required else "No",
            ", ".join(col.options) if col.options else "-",
        )

    console.print(col_table)


@app.command()
def create(
    name: str = typer.Argument(..., help="Name of the table"),
    columns: List[str] = typer.Argument(
        ..., help="Column definitions (format: name:type[:required][:opt1|opt2])"
    ),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Table description"),
    public: bool = typer.Option(False, "--public/--private", help="List the table publicly"),
):
    """Create a new table definition.

    Types: text, number, date, boolean, select, link (aliases like int, bool, url work)

    Examples:
        dyntable table create Inventory Item:text:required Qty:number
        dyntable table create Tasks "Title:text:required" "Status:select:open|done"
    """
    parsed_columns = _parse_columns(columns)

    with get_engine() as engine:
        try:
            table = engine.create_table(name, parsed_columns, description=description, is_public=public)
        except DynTableError as e:
            report_error(e)
            raise typer.Exit(1)

    console.print(
        f"[green]✅ Created table '{table.name}' with {len(table.columns)} columns[/green]"
    )
    console.print(f"[cyan]   ID: {table.id}[/cyan]")


@app.command()
def update(
    table_id: str = typer.Argument(..., help="Table id"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New table name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
    public: Optional[bool] = typer.Option(None, "--public/--private", help="Change visibility"),
    column: Optional[List[str]] = typer.Option(
        None,
        "--column",
        "-c",
        help="Replace ALL columns; repeat for each column (format: name:type[:required][:opt1|opt2])",
    ),
):
    """Update a table definition.

    Passing --column replaces the whole column set with new column ids.
    Existing rows are not rewritten.
    """
    parsed_columns = _parse_columns(column) if column else None

    with get_engine() as engine:
        try:
            engine.update_table(
                table_id,
                name=name,
                description=description,
                is_public=public,
                columns=parsed_columns,
            )
        except DynTableError as e:
            report_error(e)
            raise typer.Exit(1)

    console.print(f"[green]✅ Updated table {table_id}[/green]")


@app.command()
def delete(
    table_id: str = typer.Argument(..., help="Table id"),
    force: bool = typer.Option(
        False, "--force", "-f", help="Force deletion without confirmation"
    ),
):
    """Delete a table definition with all its rows."""
    if not force:
        confirm = typer.confirm(
            f"Are you sure you want to delete table {table_id} and all of its rows?"
        )
        if not confirm:
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    with get_engine() as engine:
        try:
            engine.delete_table(table_id)
        except DynTableError as e:
            report_error(e)
            raise typer.Exit(1)

    console.print(f"[green]✅ Deleted table {table_id}[/green]")


@app.command()
def repair():
    """Find and heal table definitions that were left without columns."""
    with get_engine() as engine:
        try:
            needs_columns = engine.tables.repair_incomplete_tables()
        except DynTableError as e:
            report_error(e)
            raise typer.Exit(1)

    if not needs_columns:
        console.print("[green]✅ No incomplete tables remain[/green]")
        return

    console.print("[yellow]⚠️  These tables hold rows but have no columns:[/yellow]")
    for table in needs_columns:
        console.print(f"[yellow]   {table.id}  {table.name}[/yellow]")
    console.print("[yellow]   Redefine them with 'dyntable table update ID --column ...'[/yellow]")
