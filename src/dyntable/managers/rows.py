"""Row management for dyntable - CRUD and pagination over row payloads."""

import logging
from typing import Any, Dict, Optional

from dyntable.errors import NotFoundError, ValidationError
from dyntable.managers.base import BaseManager
from dyntable.managers.validator import RowValidator
from dyntable.models import Row, RowPage, TableDefinition
from dyntable.models.base import utc_now
from dyntable.store.base import ROWS

logger = logging.getLogger(__name__)


class RowStore(BaseManager):
    """Manages rows of user-defined tables.

    Rows are validated and coerced against the table's current columns when
    written. Reads never re-validate: rows written under an older column set
    may carry extra fields or lack new ones.
    """

    def __init__(self, context, validator: Optional[RowValidator] = None):
        super().__init__(context)
        self.validator = validator or RowValidator()

    def add_row(self, table_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Validate, coerce and insert a new row.

        Args:
            table_id: Owning table id
            data: Values keyed by column name

        Returns:
            The stored row flattened to ``{id, **data}``

        Raises:
            NotFoundError: If the table doesn't exist
            ValidationError: If required values are missing or types are wrong
        """
        table = self._get_table(table_id)
        self.validator.validate(data, table.columns).raise_for_errors()

        row = Row(table_id=table_id, data=self.validator.coerce(data, table.columns))
        self.store.insert(ROWS, row.to_document())
        logger.debug(f"Added row {row.id} to table {table_id}")
        return row.flatten()

    def get_row(self, table_id: str, row_id: str) -> Dict[str, Any]:
        """Get one row flattened to ``{id, **data}``.

        Raises:
            NotFoundError: If the row doesn't exist in this table
        """
        return self._get_row(table_id, row_id).flatten()

    def update_row(self, table_id: str, row_id: str, partial: Dict[str, Any]) -> None:
        """Merge ``partial`` over the stored payload of a row.

        Only keys present in ``partial`` change; every other stored key is
        kept. A key supplied with a blank value is removed from the payload.
        This is a read-modify-write without a version check, so concurrent
        updates of the same row may overwrite each other.

        Raises:
            NotFoundError: If the table or row doesn't exist
            ValidationError: If a supplied value is invalid for its column
        """
        table = self._get_table(table_id)
        current = self._get_row(table_id, row_id)

        self.validator.validate_partial(partial, table.columns).raise_for_errors()
        changes = self.validator.coerce(partial, table.columns)

        merged = {key: value for key, value in current.data.items() if key != "id"}
        merged.update(changes)
        for key in self.validator.blank_keys(partial):
            merged.pop(key, None)

        self.store.update(
            ROWS, row_id, {"data": merged, "updated_at": utc_now().isoformat()}
        )
        logger.debug(f"Updated row {row_id} in table {table_id}")

    def delete_row(self, table_id: str, row_id: str) -> None:
        """Delete a row. Deleting a missing row is not an error."""
        deleted = self.store.delete_where(ROWS, {"id": row_id, "table_id": table_id})
        if deleted:
            logger.debug(f"Deleted row {row_id} from table {table_id}")

    def list_rows(
        self, table_id: str, page: int = 1, page_size: Optional[int] = None
    ) -> RowPage:
        """List one page of rows, newest first.

        Args:
            table_id: Owning table id
            page: 1-based page number
            page_size: Rows per page (defaults to the context's page size)

        Returns:
            RowPage with flattened rows and the exact total for the table

        Raises:
            ValidationError: If page or page_size is below 1
        """
        if page_size is None:
            page_size = self.context.default_page_size
        if page < 1:
            raise ValidationError.single("page", "page must be at least 1")
        if page_size < 1:
            raise ValidationError.single("page_size", "page_size must be at least 1")

        result = self.store.query(
            ROWS,
            filters={"table_id": table_id},
            order_by="created_at",
            ascending=False,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        rows = [Row(**item).flatten() for item in result.items]
        return RowPage(rows=rows, total=result.total_count, page=page, page_size=page_size)

    def _get_table(self, table_id: str) -> TableDefinition:
        return self.context.tables.get_table(table_id)

    def _get_row(self, table_id: str, row_id: str) -> Row:
        result = self.store.query(ROWS, filters={"id": row_id, "table_id": table_id}, limit=1)
        if not result.items:
            raise NotFoundError(f"Row '{row_id}' does not exist in table '{table_id}'")
        return Row(**result.items[0])
