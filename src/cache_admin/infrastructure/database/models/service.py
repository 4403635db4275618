from typing import Optional

from sqlmodel import Field

from cache_admin.infrastructure.database.base_model import Document


class Service(Document, table=True):
    """Service registered by an agent (or an admin). ``agent_id`` is not enforced by the store."""

    __tablename__ = "services"
    __partition_key__ = "services"

    name: str = Field(index=True, max_length=255)
    status: Optional[str] = Field(default=None, max_length=64)
    version: Optional[str] = Field(default=None, max_length=64)
    description: Optional[str] = None
    port: Optional[int] = None
    agent_id: Optional[str] = Field(default=None, index=True, max_length=36)
