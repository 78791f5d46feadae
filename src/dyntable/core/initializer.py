"""Project initialization for dyntable."""

import logging
from pathlib import Path
from typing import Optional

from dyntable.config import Config, ProjectConfig, RestConfig, CONFIG_DIR_NAME
from dyntable.store.sqlite import SQLiteStore

logger = logging.getLogger(__name__)


class ProjectInitializer:
    """Handles initialization of dyntable projects."""

    def __init__(self, project_dir: Optional[Path] = None):
        """Initialize the project initializer.

        Args:
            project_dir: Path to project directory. If None, uses current directory.
        """
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.config_dir = self.project_dir / CONFIG_DIR_NAME
        self.config_path = self.config_dir / "config.toml"

    def init_project(
        self,
        backend: str = "sqlite",
        rest: Optional[RestConfig] = None,
    ) -> ProjectConfig:
        """Initialize a new dyntable project with default configuration.

        For the SQLite backend this also creates the store file and its
        collections, which is the migration the engine depends on.

        Args:
            backend: "sqlite" or "rest"
            rest: REST backend settings, required when backend is "rest"

        Returns:
            The created ProjectConfig

        Raises:
            FileExistsError: If project already exists at the location
            ValueError: If backend is "rest" without REST settings
        """
        if self.config_path.exists():
            raise FileExistsError(f"Project already exists at {self.config_dir}")

        if backend == "rest" and rest is None:
            raise ValueError("REST backend requires a url and key")

        config = ProjectConfig(backend=backend, rest=rest)

        manager = Config(self.project_dir)
        manager.save(config)

        if config.backend == "sqlite":
            self.migrate(config)

        logger.info(f"Initialized dyntable project in {self.project_dir}")
        return config

    def migrate(self, config: Optional[ProjectConfig] = None) -> Path:
        """Create (or upgrade) the SQLite collections for a project.

        Returns:
            Path to the SQLite file
        """
        manager = Config(self.project_dir)
        db_path = manager.sqlite_path(config)
        with SQLiteStore(db_path, auto_migrate=False) as store:
            store.migrate()
        return db_path


def init_project(
    project_dir: Optional[Path] = None,
    backend: str = "sqlite",
    rest: Optional[RestConfig] = None,
) -> ProjectConfig:
    """Initialize a new dyntable project.

    This is a convenience function that creates a ProjectInitializer
    and initializes a project.

    Args:
        project_dir: Directory to initialize in (default: current directory)
        backend: "sqlite" (default) or "rest"
        rest: REST backend settings when backend is "rest"

    Returns:
        The created ProjectConfig

    Raises:
        FileExistsError: If project already exists
    """
    initializer = ProjectInitializer(project_dir)
    return initializer.init_project(backend, rest)
