"""SQLAlchemy Core table definitions for the boardctl record store.

One table holds every board's records. The stage value and the ordering
key live in real columns; the rest of the record is an opaque JSON
payload the board never inspects.
"""

from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, Table, Text

metadata = MetaData()

records = Table(
    "records",
    metadata,
    Column("board", Text, primary_key=True),
    Column("id", Text, primary_key=True),
    Column("stage", Text, nullable=False),
    Column("position", Integer, nullable=False, default=0, server_default="0"),
    Column("payload", Text, nullable=False, default="{}", server_default="{}"),  # JSON object
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
)

Index("ix_records_board_stage", records.c.board, records.c.stage, records.c.position)
