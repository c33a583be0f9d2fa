"""SQLAlchemy Core table definitions for the availctl database."""

from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, Table, Text

metadata = MetaData()

assets = Table(
    "assets",
    metadata,
    Column("asset_id", Text, primary_key=True),
    Column("lock_kind", Text),  # maintenance | withdrawal | owner | NULL (available)
    Column("owner_id", Text),  # only for owner locks
    Column("valid_until", Text),  # ISO 8601, only for owner locks
    Column("version", Integer, nullable=False, default=1, server_default="1"),
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
)

Index("ix_assets_lock_kind_valid_until", assets.c.lock_kind, assets.c.valid_until)

event_outbox = Table(
    "event_outbox",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("event_id", Text, nullable=False, unique=True),
    Column("asset_id", Text, nullable=False),
    Column("event_type", Text, nullable=False),
    Column("payload", Text, nullable=False),  # JSON
    Column("status", Text, nullable=False, default="pending", server_default="pending"),
    Column("retries", Integer, nullable=False, default=0, server_default="0"),
    Column("error", Text),
    Column("created", Text, nullable=False),
    Column("completed", Text),
)

Index("ix_event_outbox_status", event_outbox.c.status)
