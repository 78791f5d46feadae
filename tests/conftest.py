"""Pytest configuration and shared fixtures."""

import shutil
import tempfile
from pathlib import Path

import pytest

from dyntable.core.engine import DynamicTables
from dyntable.models import Column
from dyntable.store.sqlite import SQLiteStore


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    temp = tempfile.mkdtemp()
    yield Path(temp)
    shutil.rmtree(temp)


@pytest.fixture
def store(temp_dir):
    """A migrated SQLite store in a temporary file."""
    store = SQLiteStore(temp_dir / "dyntable.db")
    yield store
    store.close()


@pytest.fixture
def engine(store):
    """An engine over the temporary SQLite store."""
    return DynamicTables(store, default_page_size=20)


@pytest.fixture
def inventory(engine):
    """The Inventory table: Item (text, required) and Qty (number)."""
    return engine.create_table(
        "Inventory",
        [
            Column(name="Item", type="text", required=True),
            Column(name="Qty", type="number"),
        ],
    )
