"""SQL document store."""
from .connection import DatabaseManager, db
from .base_model import Document

__all__ = [
    "DatabaseManager",
    "db",
    "Document",
]
