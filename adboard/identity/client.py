"""
Dashboard client: local key ownership plus opportunistic backend pairing.

Holding a valid key pair is enough to use the dashboard. After a key pair is
accepted locally the client tries to log in (or register) with the backend;
if that fails the user carries on as a guest that only has the npub.
"""
import logging
import secrets
from typing import Any, Callable, Dict, List, Optional

import httpx
from pydantic import BaseModel

from .errors import IdentityError
from .keys import KeyPair, generate_key_pair, verify_key_pair
from .session import NPUB_SESSION_KEY, SessionStorage
from .signer import get_external_signer_public_key, has_external_signer

logger = logging.getLogger(__name__)

# (title, description, variant) where variant is "default" or "destructive"
Notifier = Callable[[str, str, str], None]


class AuthUser(BaseModel):
    npub: str
    id: Optional[int] = None
    username: Optional[str] = None

    @property
    def is_guest(self) -> bool:
        return self.id is None


def _log_notification(title: str, description: str, variant: str = "default") -> None:
    level = logging.WARNING if variant == "destructive" else logging.INFO
    logger.log(level, title, extra={"description": description})


class DashboardClient:
    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        http_client: Optional[httpx.AsyncClient] = None,
        session: Optional[SessionStorage] = None,
        signer: Optional[Any] = None,
        notify: Optional[Notifier] = None,
    ):
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=base_url, timeout=10.0)
        self.session = session if session is not None else SessionStorage()
        self.signer = signer
        self._notify = notify or _log_notification

        stored = self.session.npub
        self.user: Optional[AuthUser] = AuthUser(npub=stored) if stored else None

    async def __aenter__(self) -> "DashboardClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    @property
    def extension_available(self) -> bool:
        return has_external_signer(self.signer)

    def is_logged_in(self) -> bool:
        return self.session.is_logged_in()

    # ------------------------------------------------------------------
    # Login flows
    # ------------------------------------------------------------------
    async def login_with_keys(self, npub: str, nsec: str) -> AuthUser:
        if not verify_key_pair(npub, nsec):
            message = "Invalid key pair. Please check your npub and nsec."
            self._notify("Login failed", message, "destructive")
            raise IdentityError(message)

        user = await self._start_session(npub, "/api/auth/login", {"npub": npub})
        self._notify("Login successful", "You are now logged in with your Nostr keys.", "default")
        return user

    async def login_with_extension(self) -> AuthUser:
        try:
            npub = await get_external_signer_public_key(self.signer)
        except Exception as e:
            self._notify("Extension login failed", str(e) or "Failed to login with extension", "destructive")
            raise

        user = await self._start_session(npub, "/api/auth/login", {"npub": npub})
        self._notify("Login successful", "You are now logged in with your Nostr extension.", "default")
        return user

    async def login_with_random_keys(self) -> KeyPair:
        key_pair = generate_key_pair()
        payload = {
            "npub": key_pair.npub,
            "username": f"user_{key_pair.npub[5:12]}",
            # Required by the API, never used to authenticate
            "password": secrets.token_urlsafe(16),
        }
        await self._start_session(key_pair.npub, "/api/auth/register", payload)
        self._notify("Random keys generated", "You are now logged in with newly generated keys.", "default")
        return key_pair

    def logout(self) -> None:
        # No server session exists, so there is nothing to invalidate remotely
        self.session.remove_item(NPUB_SESSION_KEY)
        self.user = None
        self._notify("Logged out", "You have been successfully logged out.", "default")

    async def _start_session(self, npub: str, path: str, payload: Dict[str, Any]) -> AuthUser:
        self.session.store_npub(npub)
        self.user = AuthUser(npub=npub)

        # Guest mode fallback: local key ownership is sufficient
        try:
            response = await self._http.post(path, json=payload)
            response.raise_for_status()
            self.user = AuthUser(**response.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.info(
                "Backend identity sync failed, continuing as guest",
                extra={"path": path, "error": str(e)},
            )
        return self.user

    # ------------------------------------------------------------------
    # Ads
    # ------------------------------------------------------------------
    async def list_ads(self) -> List[Dict[str, Any]]:
        response = await self._http.get("/api/ads")
        response.raise_for_status()
        return response.json()

    async def list_user_ads(self, user_id: int) -> List[Dict[str, Any]]:
        response = await self._http.get(f"/api/ads/user/{user_id}")
        response.raise_for_status()
        return response.json()

    async def user_stats(self, user_id: int) -> Dict[str, Any]:
        response = await self._http.get(f"/api/ads/user/{user_id}/stats")
        response.raise_for_status()
        return response.json()

    async def create_ad(self, ad: Dict[str, Any]) -> Dict[str, Any]:
        payload = dict(ad)
        if self.user is not None and self.user.id is not None:
            payload.setdefault("userId", self.user.id)
        response = await self._http.post("/api/ads", json=payload)
        response.raise_for_status()
        return response.json()

    async def update_ad(self, ad_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._http.patch(f"/api/ads/{ad_id}", json=fields)
        response.raise_for_status()
        return response.json()

    async def delete_ad(self, ad_id: int) -> None:
        response = await self._http.delete(f"/api/ads/{ad_id}")
        response.raise_for_status()

    async def record_impression(self, ad_id: int) -> int:
        response = await self._http.post(f"/api/ads/{ad_id}/impression")
        response.raise_for_status()
        return response.json()["impressions"]

    async def record_click(self, ad_id: int) -> int:
        response = await self._http.post(f"/api/ads/{ad_id}/click")
        response.raise_for_status()
        return response.json()["clicks"]
