"""Base manager class and shared context for all dyntable managers."""

from dataclasses import dataclass

from dyntable.store.base import BackingStore


@dataclass
class EngineContext:
    """Shared context for all managers.

    Attributes:
        store: Backing store every manager reads from and writes to
        default_page_size: Page size used when callers don't pass one
    """
    store: BackingStore
    default_page_size: int = 20

    # Manager properties for convenient access
    # These use lazy imports to avoid circular dependencies

    @property
    def tables(self) -> "SchemaRegistry":
        """Access SchemaRegistry for this context."""
        from dyntable.managers.schema import SchemaRegistry
        return SchemaRegistry(self)

    @property
    def validator(self) -> "RowValidator":
        """Access RowValidator for this context."""
        from dyntable.managers.validator import RowValidator
        return RowValidator()


class BaseManager:
    """Base class for managers that talk to the backing store."""

    def __init__(self, context: EngineContext):
        """Initialize base manager with engine context.

        Args:
            context: EngineContext holding the store
        """
        self.context = context
        self.store = context.store
