import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, MetaData, String, Table, Text


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def prompts_table(metadata: MetaData, name: str = "prompts") -> Table:
    """Tabella dei prompt; il nome arriva da PROMPTS_TABLE."""
    return Table(
        name,
        metadata,
        Column("id", String(36), primary_key=True, default=new_id),
        Column("name", Text, nullable=False),
        Column("prompt", Text, nullable=False),
        Column("location_id", Text, nullable=True),
        Column("business_name", Text, nullable=True),
        Column("knowledgebase", Text, nullable=True),
        Column("inventory", JSON(none_as_null=True), nullable=True),
        Column("created_at", DateTime(timezone=True), nullable=False, default=utcnow, index=True),
    )
