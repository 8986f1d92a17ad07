from sqlalchemy import Column, Integer, String, Text, DateTime, func

from .base import Base

class UserDB(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(Text, unique=True, nullable=False)
    password = Column(Text, nullable=False)  # argon2 hash
    npub = Column(String(100), unique=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
