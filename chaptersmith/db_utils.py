"""Database helper utilities for ensuring schema consistency."""
from __future__ import annotations

from typing import Dict, Iterable, Set

from flask import current_app
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from .extensions import db

# Columns added after the first release, keyed by table.
_LATE_COLUMNS: Dict[str, Dict[str, str]] = {
    "projects": {
        "genre": "ALTER TABLE projects ADD COLUMN genre VARCHAR(50) NOT NULL DEFAULT 'general'",
    },
    "chapters": {
        "pov_used": "ALTER TABLE chapters ADD COLUMN pov_used VARCHAR(20)",
        "word_count": "ALTER TABLE chapters ADD COLUMN word_count INTEGER NOT NULL DEFAULT 0",
        "version": "ALTER TABLE chapters ADD COLUMN version INTEGER NOT NULL DEFAULT 1",
    },
}


def _get_column_names(table_name: str) -> Set[str]:
    inspector = inspect(db.engine)
    return {column["name"] for column in inspector.get_columns(table_name)}


def ensure_database_schema() -> None:
    """Ensure that the tables and late-added columns exist.

    Runs on every application start, so it only creates what is missing and
    never drops or rewrites data.
    """

    try:
        inspector = inspect(db.engine)
        table_names: Iterable[str] = inspector.get_table_names()

        # Import locally to avoid circular import issues during application setup.
        from .models import Chapter, Project

        required_tables = {
            "projects": Project.__table__,
            "chapters": Chapter.__table__,
        }

        for table_name, table in required_tables.items():
            if table_name not in table_names:
                table.create(bind=db.engine)

        for table_name, statements in _LATE_COLUMNS.items():
            existing_columns = _get_column_names(table_name)
            for column_name, statement in statements.items():
                if column_name in existing_columns:
                    continue
                with db.engine.begin() as connection:
                    connection.execute(text(statement))
    except SQLAlchemyError:
        # Re-raise so the application does not continue in a partially configured state.
        current_app.logger.exception("Unable to bring the database schema up to date")
        raise
