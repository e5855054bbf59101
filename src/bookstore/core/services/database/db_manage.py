"""Schema management: runs the versioned migrations against the configured database."""

from typing import Any

from loguru import logger
from sqlalchemy.engine import Engine

from src.bookstore.core.services.database.db_session import build_engine
from src.bookstore.core.services.database.migrations import Migration, MigrationManager
from src.bookstore.runtime.context import get_config


class DbManageService:
    def __init__(self, engine: Engine | None = None):
        self._engine = engine if engine is not None else build_engine(get_config())
        self._manager = MigrationManager(self._engine)

    def migrate(self, target_version: int | None = None) -> int:
        """Bring the schema to ``target_version`` (latest when omitted)."""
        if target_version is None:
            count = self._manager.migrate_to_latest()
        else:
            count = self._manager.migrate_to_version(target_version)
        logger.info(
            "Database at schema version {} ({} migration(s) run)",
            self._manager.current_version(),
            count,
        )
        return count

    def rollback(self, target_version: int | None = None) -> int:
        """Roll back to ``target_version``, or just the latest migration."""
        if target_version is None:
            return 1 if self._manager.rollback_latest() is not None else 0
        if target_version > self._manager.current_version():
            logger.warning("Target version {} is above the current schema", target_version)
            return 0
        return self._manager.migrate_to_version(target_version)

    def is_up_to_date(self) -> bool:
        return not self._manager.get_pending_migrations()

    def status(self) -> dict[str, Any]:
        return self._manager.get_status()

    @property
    def migrations(self) -> list[Migration]:
        return self._manager.migrations

    def dispose(self) -> None:
        self._engine.dispose()
