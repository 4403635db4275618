"""Azure Cosmos DB document store."""
from .client import CosmosManager, cosmos
from .repository import CosmosDocumentRepository

__all__ = [
    "CosmosManager",
    "cosmos",
    "CosmosDocumentRepository",
]
