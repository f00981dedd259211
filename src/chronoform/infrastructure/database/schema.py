"""SQLAlchemy Core table definitions for the state database.

One row per managed resource. ``entity`` holds the canonical model dump
used to rebuild the entity; ``attributes`` holds the flat, caller-facing
view (derived fields included) as last committed.
"""

from __future__ import annotations

from sqlalchemy import Column, Index, MetaData, Table, Text

metadata = MetaData()

resources = Table(
    "resources",
    metadata,
    Column("address", Text, primary_key=True),
    Column("resource_type", Text, nullable=False),
    Column("entity", Text, nullable=False),  # JSON object
    Column("attributes", Text, nullable=False),  # JSON object
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
)

Index("ix_resources_type", resources.c.resource_type)
