from .base import Repository
from .factory import build_repository
from .memory import InMemoryRepository
from .postgres import PostgresRepository

__all__ = ["Repository", "build_repository", "InMemoryRepository", "PostgresRepository"]
