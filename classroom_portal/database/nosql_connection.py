import logging
from functools import lru_cache
from azure.cosmos import CosmosClient, PartitionKey
from classroom_portal.core.config import get_settings

logger = logging.getLogger(__name__)

USERS_CONTAINER = "users"
CLASSES_CONTAINER = "classes"
ASSIGNMENTS_CONTAINER = "assignments"
SUBMISSIONS_CONTAINER = "submissions"

ALL_CONTAINERS = (
    USERS_CONTAINER,
    CLASSES_CONTAINER,
    ASSIGNMENTS_CONTAINER,
    SUBMISSIONS_CONTAINER,
)


@lru_cache()
def get_cosmos_db_connection() -> CosmosClient:
    settings = get_settings()
    return CosmosClient(settings.cosmos_endpoint, credential=settings.cosmos_key)


@lru_cache()
def get_database():
    settings = get_settings()
    client = get_cosmos_db_connection()
    return client.create_database_if_not_exists(id=settings.cosmos_database_name)


@lru_cache()
def get_container(container_name: str):
    """
    Return a client for one of the application containers, creating it on
    first use. Every container is partitioned on the document id.
    """
    database = get_database()
    container = database.create_container_if_not_exists(
        id=container_name,
        partition_key=PartitionKey(path="/id"),
    )
    logger.debug("Cosmos container ready: %s", container_name)
    return container
