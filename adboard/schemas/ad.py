from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import Field

from .base import CamelModel

# Largest value a PostgreSQL integer column holds
INT4_MAX = 2**31 - 1

# Fields that may be cleared to null through a partial update
NULLABLE_AD_FIELDS = {"user_id", "image_url", "tags"}


class AdStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    PAUSED = "paused"
    ENDED = "ended"


class AdCreate(CamelModel):
    """Input from the dashboard's create-ad form"""
    user_id: Optional[int] = Field(None, ge=1, le=INT4_MAX)
    title: str = Field(..., min_length=1)
    description: str = ""
    image_url: Optional[str] = None
    target_url: str = Field(..., min_length=1)
    budget: int = Field(..., ge=0, le=INT4_MAX)
    duration: int = Field(..., ge=0, le=INT4_MAX)
    tags: Optional[str] = None
    status: AdStatus = AdStatus.PENDING


class AdUpdate(CamelModel):
    user_id: Optional[int] = Field(None, ge=1, le=INT4_MAX)
    title: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    target_url: Optional[str] = None
    budget: Optional[int] = Field(None, ge=0, le=INT4_MAX)
    duration: Optional[int] = Field(None, ge=0, le=INT4_MAX)
    tags: Optional[str] = None
    status: Optional[AdStatus] = None

    def changes(self) -> Dict[str, Any]:
        """Fields the caller actually sent, minus nulls on required columns."""
        data = self.model_dump(exclude_unset=True, mode="json")
        return {k: v for k, v in data.items() if v is not None or k in NULLABLE_AD_FIELDS}


class Ad(CamelModel):
    id: int
    user_id: Optional[int] = None
    title: str
    description: str = ""
    image_url: Optional[str] = None
    target_url: str
    budget: int
    duration: int
    tags: Optional[str] = None
    status: AdStatus = AdStatus.PENDING
    impressions: int = 0
    clicks: int = 0
    created_at: Optional[datetime] = None


class ImpressionCount(CamelModel):
    impressions: int


class ClickCount(CamelModel):
    clicks: int


class AdStats(CamelModel):
    """Summary cards on the dashboard"""
    total_ads: int
    active_ads: int
    total_impressions: int
    total_clicks: int
    ctr: int  # percent, rounded
