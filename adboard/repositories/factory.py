import logging

from ..config import Settings
from ..exceptions import ConfigurationError
from .base import Repository
from .memory import InMemoryRepository
from .postgres import PostgresRepository

logger = logging.getLogger(__name__)


def build_repository(settings: Settings) -> Repository:
    """Pick the storage backend named by STORAGE_BACKEND."""
    backend = settings.STORAGE_BACKEND.lower()
    logger.info("Selecting storage backend", extra={"backend": backend})

    if backend == "memory":
        return InMemoryRepository()
    if backend == "postgres":
        return PostgresRepository(
            settings.DATABASE_URL,
            min_size=settings.DB_POOL_MIN_SIZE,
            max_size=settings.DB_POOL_MAX_SIZE,
            command_timeout=settings.DB_COMMAND_TIMEOUT,
            create_schema=settings.CREATE_SCHEMA,
        )
    raise ConfigurationError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND!r}")
