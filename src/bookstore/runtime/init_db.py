"""Database initialization script: applies pending schema migrations."""

from src.bookstore.core.services.database.db_manage import DbManageService


def init_db(target_version: int | None = None) -> int:
    """Run the versioned migrations; must happen before the API starts."""
    db_manage_service = DbManageService()
    try:
        return db_manage_service.migrate(target_version)
    finally:
        db_manage_service.dispose()


if __name__ == "__main__":
    init_db()
