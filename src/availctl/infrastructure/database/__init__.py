"""SQLite database engine and schema via SQLAlchemy Core."""

from availctl.infrastructure.database.engine import create_db_engine, init_database
from availctl.infrastructure.database.schema import assets, event_outbox, metadata

__all__ = [
    "assets",
    "create_db_engine",
    "event_outbox",
    "init_database",
    "metadata",
]
