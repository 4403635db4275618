from sqlmodel import Field

from cache_admin.infrastructure.database.base_model import Document


class Agent(Document, table=True):
    """Remote process that owns cache data and calls back with ``api_key``."""

    __tablename__ = "agents"
    __partition_key__ = "agents"

    name: str = Field(max_length=255)
    url: str = Field(max_length=2048)
    api_key: str = Field(index=True, max_length=128)
    is_api_key_active: bool = True
