from sqlalchemy import Column, JSON
from sqlmodel import Field

from cache_admin.domain.roles import Role
from cache_admin.infrastructure.database.base_model import Document


class User(Document, table=True):
    """Human operator. Non-admins only see services named in ``linked_service_names``."""

    __tablename__ = "users"
    __partition_key__ = "users"

    email: str = Field(index=True, max_length=320)
    password_hash: str
    role: str = Field(default=Role.USER.value, max_length=32)
    linked_service_names: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value
