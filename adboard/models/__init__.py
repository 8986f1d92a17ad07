from .base import Base
from .user import UserDB
from .ad import AdDB

__all__ = ["Base", "UserDB", "AdDB"]
