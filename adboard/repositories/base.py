from typing import Any, Dict, List, Optional, Protocol

from ..schemas.ad import Ad
from ..schemas.auth import User


class Repository(Protocol):
    """
    Storage capabilities the services rely on.

    Every backend returns None (or False for deletes) when a record does not
    exist; "not found" is never an exception. Backends are selected at
    startup and constructed once per process.
    """

    async def startup(self) -> None: ...

    async def shutdown(self) -> None: ...

    # Users
    async def create_user(self, username: str, password: str, npub: str) -> User: ...

    async def get_user(self, user_id: int) -> Optional[User]: ...

    async def get_user_by_username(self, username: str) -> Optional[User]: ...

    async def get_user_by_npub(self, npub: str) -> Optional[User]: ...

    # Ads
    async def create_ad(self, data: Dict[str, Any]) -> Ad: ...

    async def get_ad(self, ad_id: int) -> Optional[Ad]: ...

    async def get_ads_by_user_id(self, user_id: int) -> List[Ad]: ...

    async def get_all_ads(self) -> List[Ad]: ...

    async def update_ad(self, ad_id: int, fields: Dict[str, Any]) -> Optional[Ad]: ...

    async def delete_ad(self, ad_id: int) -> bool: ...

    async def increment_ad_impressions(self, ad_id: int) -> Optional[Ad]: ...

    async def increment_ad_clicks(self, ad_id: int) -> Optional[Ad]: ...
