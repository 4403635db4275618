# src/cache_admin/infrastructure/database/base_model.py
from datetime import datetime, timezone
from uuid import uuid4
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

SCHEMA_VERSION = "1.0"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())


class Document(SQLModel):
    """
    Base for all stored documents.

    Subclasses set ``__tablename__`` (also used as the Cosmos container name)
    and ``__partition_key__``, the fixed partition value every document of the
    type is written under.

    Example:
        class Agent(Document, table=True):
            __tablename__ = "agents"
            __partition_key__ = "agents"
            name: str
    """

    __partition_key__ = ""

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    partition_key: str = Field(default="", max_length=64)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    schema_version: str = Field(default=SCHEMA_VERSION, max_length=16)
