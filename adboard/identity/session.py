from typing import Dict, Optional

NPUB_SESSION_KEY = "npub"


class SessionStorage:
    """
    Volatile storage scoped to one client session.

    Holds the logged-in public identifier under a fixed key; nothing is
    written to disk and the data is gone when the object is.
    """

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()

    @property
    def npub(self) -> Optional[str]:
        return self.get_item(NPUB_SESSION_KEY)

    def store_npub(self, npub: str) -> None:
        self.set_item(NPUB_SESSION_KEY, npub)

    def is_logged_in(self) -> bool:
        return bool(self.npub)
