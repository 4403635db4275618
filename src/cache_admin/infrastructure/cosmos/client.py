"""
Cosmos DB connection for the document store.

One container per document type, named after the model's ``__tablename__``
and partitioned on ``/partitionKey``. Containers are created on first
connect and their references cached for the lifetime of the process.
"""
import logging
from typing import Iterable, Optional

from azure.cosmos import PartitionKey
from azure.cosmos.aio import ContainerProxy, CosmosClient, DatabaseProxy

from cache_admin.infrastructure.database.base_model import Document

logger = logging.getLogger(__name__)

PARTITION_KEY_PATH = "/partitionKey"

# Azure SDK request logging is very chatty at INFO
for _name in ("azure.core.pipeline.policies.http_logging_policy", "azure.core", "azure.cosmos"):
    logging.getLogger(_name).setLevel(logging.WARNING)


class CosmosManager:
    """Shared async Cosmos client plus cached container references."""

    def __init__(self):
        self._client: Optional[CosmosClient] = None
        self._database: Optional[DatabaseProxy] = None
        self._containers: dict[str, ContainerProxy] = {}

    async def connect(
        self,
        connection_string: str,
        database_name: str,
        models: Iterable[type[Document]],
        offer_throughput: int = 400,
    ) -> None:
        """
        Open the client and make sure the database and containers exist.

        Raises:
            RuntimeError: If already connected
        """
        if self._client is not None:
            raise RuntimeError("Cosmos already connected")

        self._client = CosmosClient.from_connection_string(connection_string)
        try:
            self._database = await self._client.create_database_if_not_exists(id=database_name)
            for model in models:
                await self._ensure_container(model.__tablename__, offer_throughput)
        except Exception:
            await self.disconnect()
            raise

        logger.info(
            f"Cosmos database '{database_name}' ready with containers {sorted(self._containers)}"
        )

    async def _ensure_container(self, container_id: str, offer_throughput: int) -> ContainerProxy:
        if container_id in self._containers:
            return self._containers[container_id]

        logger.info(f"Creating/getting Cosmos DB container {container_id}")
        container = await self._database.create_container_if_not_exists(
            id=container_id,
            partition_key=PartitionKey(path=PARTITION_KEY_PATH, kind="Hash"),
            offer_throughput=offer_throughput,
        )
        self._containers[container_id] = container
        return container

    def container(self, container_id: str) -> ContainerProxy:
        """Get a container created during ``connect``."""
        if container_id not in self._containers:
            raise RuntimeError(f"Cosmos container '{container_id}' is not initialized")
        return self._containers[container_id]

    async def disconnect(self) -> None:
        if self._client is not None:
            await self._client.close()
            logger.info("Cosmos client closed")
        self._client = None
        self._database = None
        self._containers.clear()

    async def health_check(self) -> bool:
        """Read the database properties. Returns False instead of raising."""
        if self._database is None:
            return False

        try:
            await self._database.read()
            return True
        except Exception as e:
            logger.error(f"Cosmos health check failed: {e}")
            return False

    @property
    def is_connected(self) -> bool:
        return self._client is not None


# Global instance
cosmos = CosmosManager()
