from datetime import datetime
from typing import Any, Dict, List, Optional

from ..exceptions import DuplicateUserError
from ..schemas.ad import Ad
from ..schemas.auth import User


class InMemoryRepository:
    """
    Dict-backed storage for development and tests.

    Ids come from per-table counters that only move forward, so a deleted
    id is never handed out again. There is no await between the read and
    the write of an increment, so the event loop serialises them.
    """

    def __init__(self):
        self._users: Dict[int, User] = {}
        self._ads: Dict[int, Ad] = {}
        self._next_user_id = 1
        self._next_ad_id = 1

    async def startup(self) -> None:
        pass

    async def shutdown(self) -> None:
        pass

    async def create_user(self, username: str, password: str, npub: str) -> User:
        # Same uniqueness as the users table constraints
        if any(u.npub == npub or u.username == username for u in self._users.values()):
            raise DuplicateUserError(npub)
        user = User(
            id=self._next_user_id,
            username=username,
            password=password,
            npub=npub,
            created_at=datetime.now(),
        )
        self._next_user_id += 1
        self._users[user.id] = user
        return user

    async def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.username == username), None)

    async def get_user_by_npub(self, npub: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.npub == npub), None)

    async def create_ad(self, data: Dict[str, Any]) -> Ad:
        ad = Ad(
            **data,
            id=self._next_ad_id,
            impressions=0,
            clicks=0,
            created_at=datetime.now(),
        )
        self._next_ad_id += 1
        self._ads[ad.id] = ad
        return ad

    async def get_ad(self, ad_id: int) -> Optional[Ad]:
        return self._ads.get(ad_id)

    async def get_ads_by_user_id(self, user_id: int) -> List[Ad]:
        return [ad for ad in self._ads.values() if ad.user_id == user_id]

    async def get_all_ads(self) -> List[Ad]:
        return list(self._ads.values())

    async def update_ad(self, ad_id: int, fields: Dict[str, Any]) -> Optional[Ad]:
        ad = self._ads.get(ad_id)
        if ad is None:
            return None
        # Repository-assigned fields are not caller-editable
        fields = {k: v for k, v in fields.items() if k not in ("id", "impressions", "clicks", "created_at")}
        updated = Ad.model_validate({**ad.model_dump(), **fields})
        self._ads[ad_id] = updated
        return updated

    async def delete_ad(self, ad_id: int) -> bool:
        return self._ads.pop(ad_id, None) is not None

    async def increment_ad_impressions(self, ad_id: int) -> Optional[Ad]:
        return self._increment(ad_id, "impressions")

    async def increment_ad_clicks(self, ad_id: int) -> Optional[Ad]:
        return self._increment(ad_id, "clicks")

    def _increment(self, ad_id: int, counter: str) -> Optional[Ad]:
        ad = self._ads.get(ad_id)
        if ad is None:
            return None
        updated = ad.model_copy(update={counter: getattr(ad, counter) + 1})
        self._ads[ad_id] = updated
        return updated
