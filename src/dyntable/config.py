"""Configuration management for dyntable projects."""

import os
from pathlib import Path
from typing import Optional, Dict, Any, Literal
import toml
from pydantic import BaseModel, Field, ConfigDict

CONFIG_DIR_NAME = ".dyntable"


class RestConfig(BaseModel):
    """Connection settings for a PostgREST-compatible backend."""

    url: str = Field(description="Base URL of the backend")
    key: str = Field(description="API key for authentication")


class ProjectConfig(BaseModel):
    """Configuration for a dyntable project stored in .dyntable/config.toml."""

    model_config = ConfigDict(
        extra="allow"
    )  # Allow additional fields for extensibility

    backend: Literal["sqlite", "rest"] = Field(
        default="sqlite", description="Which backing store to use"
    )
    sqlite_path: str = Field(
        default="dyntable.db",
        description="SQLite file, relative to the config directory unless absolute",
    )
    rest: Optional[RestConfig] = Field(
        default=None, description="REST backend settings (backend = 'rest')"
    )
    default_page_size: int = Field(
        default=20, ge=1, description="Rows per page when none is requested"
    )


class Config:
    """Manages dyntable project configuration."""

    def __init__(self, project_dir: Optional[Path] = None):
        """Initialize config manager.

        Args:
            project_dir: Path to project directory. If None, uses DYNTABLE_PROJECT_DIR env var or current directory.
        """
        # Check environment variable first
        if project_dir is None:
            env_dir = os.environ.get("DYNTABLE_PROJECT_DIR")
            if env_dir:
                project_dir = Path(env_dir)

        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.config_dir = self.project_dir / CONFIG_DIR_NAME
        self.config_path = self.config_dir / "config.toml"
        self._config: Optional[ProjectConfig] = None

    @property
    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()

    def load(self) -> ProjectConfig:
        """Load configuration from disk, with environment variable overrides."""
        if not self.exists:
            raise FileNotFoundError(f"Config file not found at {self.config_path}")

        with open(self.config_path, "r") as f:
            data = toml.load(f)

        self._apply_env_overrides(data)

        self._config = ProjectConfig(**data)
        return self._config

    def _apply_env_overrides(self, data: Dict[str, Any]) -> None:
        """Apply environment variable overrides to configuration data."""
        if env_backend := os.environ.get("DYNTABLE_BACKEND"):
            data["backend"] = env_backend

        if env_page_size := os.environ.get("DYNTABLE_PAGE_SIZE"):
            data["default_page_size"] = env_page_size

        env_url = os.environ.get("DYNTABLE_REST_URL")
        env_key = os.environ.get("DYNTABLE_API_KEY")

        if env_url and env_key:
            data["rest"] = {
                "url": env_url.rstrip("/"),  # Remove trailing slash
                "key": env_key,
            }

    def save(self, config: Optional[ProjectConfig] = None) -> None:
        """Save configuration to disk.

        Args:
            config: Configuration to save. If None, saves current config.
        """
        if config:
            self._config = config

        if not self._config:
            raise ValueError("No configuration to save")

        # Ensure config directory exists
        self.config_dir.mkdir(parents=True, exist_ok=True)

        # TOML has no null, so unset sections are left out
        config_dict = self._config.model_dump(exclude_none=True)

        with open(self.config_path, "w") as f:
            toml.dump(config_dict, f)

    def sqlite_path(self, config: Optional[ProjectConfig] = None) -> Path:
        """Resolve the SQLite file path for a configuration."""
        config = config or self._config or self.load()
        path = Path(config.sqlite_path)
        return path if path.is_absolute() else self.config_dir / path

    def init_project(self) -> ProjectConfig:
        """Initialize a new dyntable project with default configuration.

        Delegates to the ProjectInitializer for the actual initialization logic.
        """
        from dyntable.core.initializer import ProjectInitializer

        initializer = ProjectInitializer(self.project_dir)
        config = initializer.init_project()

        self._config = config
        return config


def find_project_dir(start_path: Path) -> Path:
    """Walk up from ``start_path`` to the nearest directory holding a project config.

    A bare ``.dyntable`` directory without ``config.toml`` is skipped.

    Raises:
        FileNotFoundError: If no parent directory holds .dyntable/config.toml
    """
    start = Path(start_path).resolve()
    for candidate in (start, *start.parents):
        if (candidate / CONFIG_DIR_NAME / "config.toml").is_file():
            return candidate

    raise FileNotFoundError(
        f"No dyntable project ({CONFIG_DIR_NAME}/config.toml) found in {start_path} "
        "or any parent directory"
    )
