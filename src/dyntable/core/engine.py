"""Unified entry point wiring a backing store into the managers."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from dyntable.config import Config, ProjectConfig, find_project_dir
from dyntable.managers.base import EngineContext
from dyntable.managers.rows import RowStore
from dyntable.managers.schema import ColumnInput, SchemaRegistry
from dyntable.managers.validator import RowValidator
from dyntable.models import RowPage, TableDefinition, ValidationResult
from dyntable.store.base import BackingStore
from dyntable.store.rest import RestStore
from dyntable.store.sqlite import SQLiteStore

logger = logging.getLogger(__name__)


class DynamicTables:
    """Unified interface over the dynamic table engine.

    Examples:
        # Local project (SQLite)
        engine = connect(project_dir="/path/to/project")

        inventory = engine.create_table("Inventory", [
            Column(name="Item", type="text", required=True),
            Column(name="Qty", type="number"),
        ])
        row = engine.add_row(inventory.id, {"Item": "Pen"})
        engine.update_row(inventory.id, row["id"], {"Qty": 5})
        page = engine.list_rows(inventory.id, page=1, page_size=20)

        # Any store can be passed in directly
        engine = DynamicTables(SQLiteStore(":memory:"))
    """

    def __init__(self, store: BackingStore, default_page_size: int = 20):
        """Initialize the engine.

        Args:
            store: Backing store holding definitions and rows
            default_page_size: Rows per page when callers don't pass one
        """
        self.store = store
        self.context = EngineContext(store=store, default_page_size=default_page_size)
        self._tables: Optional[SchemaRegistry] = None
        self._rows: Optional[RowStore] = None
        self._validator: Optional[RowValidator] = None

    @property
    def tables(self) -> SchemaRegistry:
        """Access the schema registry."""
        if self._tables is None:
            self._tables = self.context.tables
        return self._tables

    @property
    def rows(self) -> RowStore:
        """Access the row store."""
        if self._rows is None:
            self._rows = RowStore(self.context, validator=self.validator)
        return self._rows

    @property
    def validator(self) -> RowValidator:
        """Access the row validator."""
        if self._validator is None:
            self._validator = self.context.validator
        return self._validator

    # Schema operations

    def list_tables(self, public_only: bool = False) -> List[TableDefinition]:
        return self.tables.list_tables(public_only=public_only)

    def get_table(self, table_id: str) -> TableDefinition:
        return self.tables.get_table(table_id)

    def create_table(
        self,
        name: str,
        columns: Sequence[ColumnInput],
        description: Optional[str] = None,
        is_public: bool = False,
    ) -> TableDefinition:
        return self.tables.create_table(name, columns, description=description, is_public=is_public)

    def update_table(self, table_id: str, **changes: Any) -> None:
        """Patch a table; see SchemaRegistry.update_table for accepted keys."""
        self.tables.update_table(table_id, **changes)

    def delete_table(self, table_id: str) -> None:
        self.tables.delete_table(table_id)

    # Row operations

    def validate_row(self, table_id: str, data: Dict[str, Any]) -> ValidationResult:
        """Check a row against a table without writing it."""
        table = self.tables.get_table(table_id)
        return self.validator.validate(data, table.columns)

    def add_row(self, table_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.rows.add_row(table_id, data)

    def get_row(self, table_id: str, row_id: str) -> Dict[str, Any]:
        return self.rows.get_row(table_id, row_id)

    def update_row(self, table_id: str, row_id: str, partial: Dict[str, Any]) -> None:
        self.rows.update_row(table_id, row_id, partial)

    def delete_row(self, table_id: str, row_id: str) -> None:
        self.rows.delete_row(table_id, row_id)

    def list_rows(
        self, table_id: str, page: int = 1, page_size: Optional[int] = None
    ) -> RowPage:
        return self.rows.list_rows(table_id, page=page, page_size=page_size)

    def close(self) -> None:
        self.store.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _ = (exc_type, exc_val, exc_tb)
        self.close()
        return False


def store_from_config(config: Config, project_config: Optional[ProjectConfig] = None) -> BackingStore:
    """Build the backing store a project is configured for.

    Raises:
        ValueError: If the REST backend is selected without REST settings
    """
    project_config = project_config or config.load()
    if project_config.backend == "rest":
        if project_config.rest is None:
            raise ValueError(
                "REST backend selected but no [rest] url/key configured. "
                "Set DYNTABLE_REST_URL and DYNTABLE_API_KEY or edit config.toml"
            )
        return RestStore(project_config.rest.url, project_config.rest.key)

    # The collections are created by 'dyntable init'; a missing one is reported, not created
    return SQLiteStore(config.sqlite_path(project_config), auto_migrate=False)


def connect(project_dir: Optional[Path] = None) -> DynamicTables:
    """Connect to the store configured for a dyntable project.

    Args:
        project_dir: Path to project directory (optional, will search for .dyntable)

    Returns:
        DynamicTables instance

    Examples:
        # Connect using current directory
        engine = connect()

        # Connect with explicit project directory
        engine = connect(Path("/path/to/project"))
    """
    if project_dir is None and not os.environ.get("DYNTABLE_PROJECT_DIR"):
        try:
            project_dir = find_project_dir(Path.cwd())
        except FileNotFoundError:
            raise ValueError("No .dyntable directory found. Run 'dyntable init' first.")

    config = Config(project_dir)
    project_config = config.load()
    store = store_from_config(config, project_config)
    logger.debug(f"Connected to {project_config.backend} store for {project_dir}")
    return DynamicTables(store, default_page_size=project_config.default_page_size)
