from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, func

from .base import Base

class AdDB(Base):
    """
    ORM Model - Mapping 1-1 with table 'ads' in Postgres
    """
    __tablename__ = "ads"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, server_default="")
    image_url = Column(Text)
    target_url = Column(Text, nullable=False)
    budget = Column(Integer, nullable=False)  # sats, informational
    duration = Column(Integer, nullable=False)  # days, informational
    tags = Column(Text)  # "bitcoin,nostr"
    status = Column(Text, nullable=False, server_default="pending")
    impressions = Column(Integer, nullable=False, server_default="0")
    clicks = Column(Integer, nullable=False, server_default="0")
    created_at = Column(DateTime, server_default=func.now())
