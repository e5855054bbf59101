"""
Database Migration System

Versioned, reversible schema changes for the bookstore database. Each
migration carries a snapshot of the schema it builds, so applying the
history in order reproduces the schema regardless of the current ORM models.
Applied versions are tracked in the ``schema_migrations`` table.
"""

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import sqlalchemy as sa
from loguru import logger
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError


class MigrationError(Exception):
    """Exception raised for migration-related errors."""


@dataclass
class Migration:
    """Represents a database migration."""

    version: int
    name: str
    upgrade: Callable[[Connection], None]
    downgrade: Callable[[Connection], None] | None = None
    applied_at: datetime | None = None

    @property
    def is_applied(self) -> bool:
        return self.applied_at is not None


_history_metadata = sa.MetaData()

schema_migrations = sa.Table(
    "schema_migrations",
    _history_metadata,
    sa.Column("version", sa.Integer, primary_key=True, autoincrement=False),
    sa.Column("name", sa.String(255), nullable=False),
    sa.Column("applied_at", sa.DateTime(timezone=True), nullable=False),
    sa.Column("execution_time_ms", sa.Integer, nullable=False),
)


# --- Migration history ---

# 64-bit ids; SQLite needs plain INTEGER for its rowid alias
_BOOK_ID = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def _books_v1(metadata: sa.MetaData) -> sa.Table:
    return sa.Table(
        "books",
        metadata,
        sa.Column("id", _BOOK_ID, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String, nullable=False),
        sa.Column("author", sa.String, nullable=False),
        sa.Column("genre", sa.String, nullable=False),
        sa.Column("price", sa.Float, nullable=False),
    )


def _create_books(conn: Connection) -> None:
    _books_v1(sa.MetaData()).create(conn)


def _drop_books(conn: Connection) -> None:
    _books_v1(sa.MetaData()).drop(conn)


def _genre_index() -> sa.Index:
    return sa.Index("ix_books_genre", _books_v1(sa.MetaData()).c.genre)


def _create_genre_index(conn: Connection) -> None:
    _genre_index().create(conn)


def _drop_genre_index(conn: Connection) -> None:
    _genre_index().drop(conn)


MIGRATIONS: list[Migration] = [
    Migration(1, "create_books_table", _create_books, _drop_books),
    Migration(2, "index_books_genre", _create_genre_index, _drop_genre_index),
]


class MigrationManager:
    """
    Manages database schema migrations.

    Applies, rolls back and reports on the migration history against one
    SQLAlchemy engine. Every migration runs in its own transaction together
    with its bookkeeping row.
    """

    def __init__(
        self, engine: Engine, migrations: Iterable[Migration] | None = None
    ) -> None:
        source = MIGRATIONS if migrations is None else migrations
        # copies, so applied_at never leaks between managers
        self._migrations = sorted(
            (Migration(m.version, m.name, m.upgrade, m.downgrade) for m in source),
            key=lambda m: m.version,
        )
        versions = [m.version for m in self._migrations]
        if len(versions) != len(set(versions)):
            raise MigrationError(f"Duplicate migration versions: {versions}")
        if any(v <= 0 for v in versions):
            raise MigrationError("Migration versions must be positive integers")
        self._engine = engine

    @property
    def migrations(self) -> list[Migration]:
        return list(self._migrations)

    @property
    def latest_version(self) -> int:
        return self._migrations[-1].version if self._migrations else 0

    def initialize(self) -> None:
        """Create the migration tracking table if it does not exist."""
        _history_metadata.create_all(self._engine)

    def _refresh(self) -> None:
        """Reload applied state; read-only, a missing history table means none."""
        with self._engine.connect() as conn:
            if not sa.inspect(conn).has_table(schema_migrations.name):
                rows = []
            else:
                rows = conn.execute(
                    sa.select(
                        schema_migrations.c.version, schema_migrations.c.applied_at
                    )
                ).all()
        applied = {row.version: row.applied_at for row in rows}
        for migration in self._migrations:
            migration.applied_at = applied.get(migration.version)

    def get_applied_migrations(self) -> list[Migration]:
        self._refresh()
        return [m for m in self._migrations if m.is_applied]

    def get_pending_migrations(self) -> list[Migration]:
        self._refresh()
        return [m for m in self._migrations if not m.is_applied]

    def current_version(self) -> int:
        applied = self.get_applied_migrations()
        return applied[-1].version if applied else 0

    def apply_migration(self, migration: Migration) -> None:
        self.initialize()
        logger.info("Applying migration {}: {}", migration.version, migration.name)
        start = time.perf_counter()
        applied_at = datetime.now(UTC)

        try:
            with self._engine.begin() as conn:
                migration.upgrade(conn)
                conn.execute(
                    schema_migrations.insert().values(
                        version=migration.version,
                        name=migration.name,
                        applied_at=applied_at,
                        execution_time_ms=int((time.perf_counter() - start) * 1000),
                    )
                )
        except SQLAlchemyError as e:
            logger.error("Failed to apply migration {}: {}", migration.version, e)
            raise MigrationError(f"Migration {migration.version} failed: {e}") from e

        migration.applied_at = applied_at
        logger.info("Migration {} applied", migration.version)

    def rollback_migration(self, migration: Migration) -> None:
        if migration.downgrade is None:
            raise MigrationError(f"Migration {migration.version} has no rollback")

        logger.info("Rolling back migration {}: {}", migration.version, migration.name)
        try:
            with self._engine.begin() as conn:
                migration.downgrade(conn)
                conn.execute(
                    schema_migrations.delete().where(
                        schema_migrations.c.version == migration.version
                    )
                )
        except SQLAlchemyError as e:
            logger.error("Failed to roll back migration {}: {}", migration.version, e)
            raise MigrationError(
                f"Migration rollback {migration.version} failed: {e}"
            ) from e

        migration.applied_at = None
        logger.info("Migration {} rolled back", migration.version)

    def migrate_to_latest(self) -> int:
        """Apply every pending migration in order; returns how many ran."""
        pending = self.get_pending_migrations()
        if not pending:
            logger.info("Database schema is up to date (version {})", self.latest_version)
            return 0

        for migration in pending:
            self.apply_migration(migration)
        return len(pending)

    def migrate_to_version(self, target_version: int) -> int:
        """Move the schema up or down to ``target_version``; returns steps taken."""
        known = {0} | {m.version for m in self._migrations}
        if target_version not in known:
            raise MigrationError(f"Unknown migration version {target_version}")

        current = self.current_version()
        if target_version >= current:
            to_apply = [
                m for m in self.get_pending_migrations() if m.version <= target_version
            ]
            for migration in to_apply:
                self.apply_migration(migration)
            return len(to_apply)

        to_rollback = [
            m for m in reversed(self.get_applied_migrations())
            if m.version > target_version
        ]
        for migration in to_rollback:
            self.rollback_migration(migration)
        return len(to_rollback)

    def rollback_latest(self) -> Migration | None:
        applied = self.get_applied_migrations()
        if not applied:
            return None
        migration = applied[-1]
        self.rollback_migration(migration)
        return migration

    def get_status(self) -> dict[str, Any]:
        self._refresh()
        applied = [m for m in self._migrations if m.is_applied]
        return {
            "current_version": applied[-1].version if applied else 0,
            "latest_version": self.latest_version,
            "pending": len(self._migrations) - len(applied),
            "migrations": [
                {
                    "version": m.version,
                    "name": m.name,
                    "applied_at": m.applied_at,
                }
                for m in self._migrations
            ],
        }
