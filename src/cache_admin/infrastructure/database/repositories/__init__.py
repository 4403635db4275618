from .base import SqlDocumentRepository

__all__ = [
    "SqlDocumentRepository",
]
