"""Cart storage for the storefront"""

import copy
import json
import logging
from typing import Any, Optional

from cart_core import StaleCartError

logger = logging.getLogger(__name__)


def _version_of(document: Any) -> int:
    if isinstance(document, dict) and isinstance(document.get("version"), int):
        return document["version"]
    return 0


class UserCartDatabase:
    """In-memory cart documents for signed-in users, one per user"""

    def __init__(self):
        self.documents: dict[str, dict] = {}

    def load(self, owner: str) -> Optional[dict]:
        """Get a copy of the user's cart document"""
        document = self.documents.get(owner)
        return copy.deepcopy(document) if document is not None else None

    def save(self, owner: str, document: dict, expected_version: int) -> None:
        """Replace the user's cart document if nobody else wrote it first"""
        current = _version_of(self.documents.get(owner))
        if current != expected_version:
            raise StaleCartError(
                f"Cart for {owner} is at version {current}, expected {expected_version}"
            )
        self.documents[owner] = copy.deepcopy(document)

    def delete(self, owner: str) -> None:
        self.documents.pop(owner, None)


class GuestCartStorage:
    """
    Guest carts as JSON text keyed by session, mirroring browser storage.

    Unreadable entries are treated as an empty cart rather than an error.
    """

    KEY_PREFIX = "guest_cart:"

    def __init__(self):
        self.entries: dict[str, str] = {}

    def _key(self, session_id: str) -> str:
        return f"{self.KEY_PREFIX}{session_id}"

    def _parse(self, session_id: str, raw: str) -> dict:
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning(f"Guest cart {session_id} is not valid JSON ({exc}), resetting")
            return {}
        if not isinstance(document, dict):
            logger.warning(f"Guest cart {session_id} is not an object, resetting")
            return {}
        return document

    def load(self, session_id: str) -> Optional[dict]:
        raw = self.entries.get(self._key(session_id))
        if raw is None:
            return None
        return self._parse(session_id, raw)

    def save(self, session_id: str, document: dict, expected_version: int) -> None:
        raw = self.entries.get(self._key(session_id))
        current = _version_of(self._parse(session_id, raw)) if raw is not None else 0
        if current != expected_version:
            raise StaleCartError(
                f"Guest cart {session_id} is at version {current}, expected {expected_version}"
            )
        self.entries[self._key(session_id)] = json.dumps(document)

    def delete(self, session_id: str) -> None:
        self.entries.pop(self._key(session_id), None)


# Singleton instances
cart_db = UserCartDatabase()
guest_cart_db = GuestCartStorage()
