"""Table definition management for dyntable."""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from dyntable.errors import (
    BackingStoreError,
    NotFoundError,
    PartialFailureError,
    ValidationError,
)
from dyntable.managers.base import BaseManager
from dyntable.models import Column, ColumnDefinition, FieldError, TableDefinition
from dyntable.models.base import utc_now
from dyntable.store.base import TABLES, COLUMNS, ROWS
from dyntable.utils.name_validator import name_error

logger = logging.getLogger(__name__)

ColumnInput = Union[Column, Dict[str, Any]]


class SchemaRegistry(BaseManager):
    """Manages table definitions and their columns.

    Definitions and columns live in separate collections and the store offers
    no transaction spanning both, so every two-step write here carries its own
    compensation.
    """

    def list_tables(self, public_only: bool = False) -> List[TableDefinition]:
        """List table definitions, newest first, each with its columns.

        Args:
            public_only: If True, only return tables flagged as public

        Returns:
            List of TableDefinition objects
        """
        filters = {"is_public": True} if public_only else None
        result = self.store.query(
            TABLES, filters=filters, order_by="created_at", ascending=False
        )
        return [self._attach_columns(doc) for doc in result.items]

    def get_table(self, table_id: str) -> TableDefinition:
        """Get one table definition with its columns.

        Raises:
            NotFoundError: If the table doesn't exist
        """
        doc = self.store.get(TABLES, table_id)
        if doc is None:
            raise NotFoundError(f"Table '{table_id}' does not exist")
        return self._attach_columns(doc)

    def create_table(
        self,
        name: str,
        columns: Sequence[ColumnInput],
        description: Optional[str] = None,
        is_public: bool = False,
    ) -> TableDefinition:
        """Create a new table definition.

        The definition is written first, then its columns. If the column write
        fails the definition is deleted again before the error propagates.

        Args:
            name: Display name of the table
            columns: Column specifications, in display order
            description: Optional description
            is_public: Whether the table is publicly listed

        Returns:
            Created TableDefinition

        Raises:
            ValidationError: If the name or any column is invalid
            PartialFailureError: If the columns could not be written
            BackingStoreError: If the definition itself could not be written
        """
        errors = []
        problem = name_error(name, "table")
        if problem:
            errors.append(FieldError(field="name", message=problem))
        column_defs = self._build_columns(columns, errors)
        if errors:
            raise ValidationError(errors)

        table = TableDefinition(
            name=name.strip(),
            description=(description or "").strip() or None,
            is_public=is_public,
        )
        self.store.insert(TABLES, table.to_document())

        try:
            self.store.insert_many(COLUMNS, [col.to_document(table.id) for col in column_defs])
        except BackingStoreError as e:
            logger.error(f"Failed to create columns for table '{table.name}': {e}")
            rolled_back = self._try(lambda: self.store.delete(TABLES, table.id))
            raise PartialFailureError("Create table", e, rolled_back) from e

        table.columns = column_defs
        logger.info(f"Created table '{table.name}' ({table.id}) with {len(column_defs)} columns")
        return table

    def update_table(
        self,
        table_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        is_public: Optional[bool] = None,
        columns: Optional[Sequence[ColumnInput]] = None,
    ) -> None:
        """Patch a table definition and optionally replace all of its columns.

        Replacing columns deletes the current set and inserts the new one with
        fresh ids; rows are left untouched.

        Args:
            table_id: Table to update
            name: New name, if changing
            description: New description ("" clears it), if changing
            is_public: New visibility, if changing
            columns: Complete new column set, if replacing

        Raises:
            NotFoundError: If the table doesn't exist
            ValidationError: If the new name or columns are invalid
            PartialFailureError: If the new columns could not be written after
                the old ones were removed
        """
        current = self.get_table(table_id)

        errors = []
        patch: Dict[str, Any] = {}
        if name is not None:
            problem = name_error(name, "table")
            if problem:
                errors.append(FieldError(field="name", message=problem))
            patch["name"] = name.strip()
        if description is not None:
            patch["description"] = description.strip() or None
        if is_public is not None:
            patch["is_public"] = is_public

        column_defs = None
        if columns is not None:
            column_defs = self._build_columns(columns, errors)
        if errors:
            raise ValidationError(errors)

        patch["updated_at"] = utc_now().isoformat()
        self.store.update(TABLES, table_id, patch)

        if column_defs is not None:
            self._replace_columns(current, column_defs)

        logger.info(f"Updated table '{current.name}' ({table_id})")

    def delete_table(self, table_id: str) -> None:
        """Delete a table definition, its columns and its rows.

        The store's cascade removes dependents. Unknown ids are a no-op.
        """
        self.store.delete(TABLES, table_id)
        logger.info(f"Deleted table {table_id}")

    def find_incomplete_tables(self) -> List[TableDefinition]:
        """Find definitions left with zero columns by an interrupted write."""
        return [table for table in self.list_tables() if not table.columns]

    def repair_incomplete_tables(self) -> List[TableDefinition]:
        """Heal definitions that have zero columns. Safe to run repeatedly.

        Definitions without rows are leftovers of an interrupted create and
        are deleted. Definitions that still hold rows are kept so no data is
        lost; they are returned so an operator can redefine their columns.

        Returns:
            Definitions that still need columns
        """
        needs_columns = []
        for table in self.find_incomplete_tables():
            rows = self.store.query(ROWS, filters={"table_id": table.id}, limit=0)
            if rows.total_count:
                logger.warning(
                    f"Table '{table.name}' ({table.id}) has no columns but holds "
                    f"{rows.total_count} rows; redefine its columns"
                )
                needs_columns.append(table)
            else:
                logger.warning(f"Removing incomplete table '{table.name}' ({table.id})")
                self.store.delete(TABLES, table.id)
        return needs_columns

    def _replace_columns(
        self, current: TableDefinition, column_defs: List[ColumnDefinition]
    ) -> None:
        """Delete-all then insert-all, restoring the old set if the insert fails."""
        self.store.delete_where(COLUMNS, {"table_id": current.id})
        try:
            self.store.insert_many(COLUMNS, [col.to_document(current.id) for col in column_defs])
        except BackingStoreError as e:
            logger.error(f"Failed to replace columns of table '{current.name}': {e}")
            previous = [col.to_document(current.id) for col in current.columns]
            restored = self._try(lambda: self.store.insert_many(COLUMNS, previous))
            raise PartialFailureError("Replace columns", e, restored) from e

    def _attach_columns(self, doc: Dict[str, Any]) -> TableDefinition:
        result = self.store.query(
            COLUMNS, filters={"table_id": doc["id"]}, order_by="column_order"
        )
        return TableDefinition.from_document(doc, result.items)

    def _build_columns(
        self, columns: Sequence[ColumnInput], errors: List[FieldError]
    ) -> List[ColumnDefinition]:
        """Turn column input into fresh definitions, collecting problems into errors."""
        if not columns:
            errors.append(FieldError(field="columns", message="At least one column is required"))
            return []

        built = []
        seen = set()
        for index, spec in enumerate(columns):
            try:
                data = spec.model_dump() if isinstance(spec, Column) else dict(spec)
                data.pop("id", None)
                data.pop("order", None)
                column = ColumnDefinition(**data, order=index)
            except (PydanticValidationError, TypeError) as e:
                errors.append(FieldError(field=f"columns[{index}]", message=str(e)))
                continue

            problem = name_error(column.name, "column")
            if problem:
                errors.append(FieldError(field=f"columns[{index}]", message=problem))
                continue

            column.name = column.name.strip()
            if column.name in seen:
                errors.append(
                    FieldError(field=column.name, message=f"Duplicate column name '{column.name}'")
                )
                continue
            seen.add(column.name)
            built.append(column)

        return built

    @staticmethod
    def _try(action) -> bool:
        """Run a compensating action, reporting whether it succeeded."""
        try:
            action()
        except BackingStoreError as e:
            logger.error(f"Rollback failed: {e}")
            return False
        return True
