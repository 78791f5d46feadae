"""Tests for the dyntable CLI."""

import json
import re
import pytest
from typer.testing import CliRunner

from dyntable.cli.main import app
from dyntable.cli.utils import parse_column_spec

runner = CliRunner()


class TestParseColumnSpec:
    """Test the name:type[:required][:options] column syntax."""

    def test_simple(self):
        col = parse_column_spec("Item:text")
        assert col.name == "Item"
        assert col.type == "text"
        assert col.required is False

    def test_required_and_alias(self):
        col = parse_column_spec("Qty:int:required")
        assert col.type == "number"
        assert col.required is True

    def test_select_options(self):
        col = parse_column_spec("Status:select:req:open|done")
        assert col.required is True
        assert col.options == ["open", "done"]

    def test_invalid(self):
        with pytest.raises(ValueError, match="Invalid column definition"):
            parse_column_spec("Item")
        with pytest.raises(ValueError, match="Invalid type"):
            parse_column_spec("Item:blob")


class TestCLICommands:
    """Run commands against a real project through CliRunner."""

    @pytest.fixture
    def project(self, temp_dir):
        result = runner.invoke(app, ["init", str(temp_dir)])
        assert result.exit_code == 0, result.output
        return temp_dir

    def invoke(self, project, args):
        return runner.invoke(app, args, env={"DYNTABLE_PROJECT_DIR": str(project)})

    def create_inventory(self, project):
        result = self.invoke(
            project, ["table", "create", "Inventory", "Item:text:required", "Qty:number"]
        )
        assert result.exit_code == 0, result.output
        return re.search(r"ID: ([0-9a-f-]{36})", result.output).group(1)

    def test_init(self, temp_dir):
        result = runner.invoke(app, ["init", str(temp_dir)])

        assert result.exit_code == 0
        assert "Initialized dyntable project" in result.output
        assert (temp_dir / ".dyntable" / "config.toml").exists()
        assert (temp_dir / ".dyntable" / "dyntable.db").exists()

    def test_init_existing(self, project):
        result = runner.invoke(app, ["init", str(project)])
        assert result.exit_code == 1
        assert "Project already exists" in result.output

    def test_init_rest_requires_url(self, temp_dir):
        result = runner.invoke(app, ["init", str(temp_dir), "--backend", "rest"])
        assert result.exit_code == 1
        assert "--url and --key" in result.output

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "dyntable version" in result.output

    def test_status(self, project):
        result = self.invoke(project, ["status"])
        assert result.exit_code == 0
        assert "Backend: sqlite" in result.output
        assert "Default page size: 20" in result.output

    def test_not_a_project(self, temp_dir):
        result = self.invoke(temp_dir, ["table", "list"])
        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_invalid_env_config_reported(self, project):
        result = runner.invoke(
            app,
            ["table", "list"],
            env={"DYNTABLE_PROJECT_DIR": str(project), "DYNTABLE_BACKEND": "mongo"},
        )

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert "backend" in result.output
        assert "Traceback" not in result.output

    def test_invalid_page_size_reported(self, project):
        result = runner.invoke(
            app,
            ["status"],
            env={"DYNTABLE_PROJECT_DIR": str(project), "DYNTABLE_PAGE_SIZE": "0"},
        )

        assert result.exit_code == 1
        assert "default_page_size" in result.output

    def test_table_lifecycle(self, project):
        result = self.invoke(project, ["table", "list"])
        assert result.exit_code == 0
        assert "No tables found" in result.output

        table_id = self.create_inventory(project)

        result = self.invoke(project, ["table", "show", table_id])
        assert result.exit_code == 0
        assert "Table: Inventory" in result.output
        assert "Item" in result.output
        assert "number" in result.output

        result = self.invoke(
            project, ["table", "update", table_id, "--name", "Stock", "-c", "Item:text", "-c", "Price:float"]
        )
        assert result.exit_code == 0
        result = self.invoke(project, ["table", "show", table_id])
        assert "Table: Stock" in result.output
        assert "Price" in result.output

        result = self.invoke(project, ["table", "delete", table_id, "--force"])
        assert result.exit_code == 0
        result = self.invoke(project, ["table", "show", table_id])
        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_table_create_invalid_column(self, project):
        result = self.invoke(project, ["table", "create", "Inventory", "Qty:blob"])
        assert result.exit_code == 1
        assert "Invalid type" in result.output

    def test_table_repair(self, project):
        self.create_inventory(project)
        result = self.invoke(project, ["table", "repair"])
        assert result.exit_code == 0
        assert "No incomplete tables remain" in result.output

    def test_row_commands(self, project):
        table_id = self.create_inventory(project)

        result = self.invoke(project, ["row", "add", table_id, "--data", '{"Item": "Pen"}'])
        assert result.exit_code == 0, result.output
        row_id = re.search(r"ID: ([0-9a-f-]{36})", result.output).group(1)

        result = self.invoke(project, ["row", "update", table_id, row_id, "--data", '{"Qty": "5"}'])
        assert result.exit_code == 0

        result = self.invoke(project, ["row", "get", table_id, row_id])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"id": row_id, "Item": "Pen", "Qty": 5}

        result = self.invoke(project, ["row", "list", table_id, "--format", "json"])
        page = json.loads(result.output)
        assert page["total"] == 1
        assert page["rows"][0]["id"] == row_id

        result = self.invoke(project, ["row", "delete", table_id, row_id, "-y"])
        assert result.exit_code == 0
        result = self.invoke(project, ["row", "list", table_id])
        assert "No rows on page 1" in result.output

    def test_row_add_validation_failure(self, project):
        table_id = self.create_inventory(project)

        result = self.invoke(project, ["row", "add", table_id, "--data", '{"Qty": "many"}'])

        assert result.exit_code == 1
        assert "Validation failed" in result.output
        assert "Item is required" in result.output
        assert "Qty must be a number" in result.output

    def test_row_add_invalid_json(self, project):
        table_id = self.create_inventory(project)

        result = self.invoke(project, ["row", "add", table_id, "--data", "[1, 2]"])
        assert result.exit_code == 1
        assert "must be a JSON object" in result.output
