"""
HTTP client for the board API.

Every call returns the full board document, exactly as the server sends it.
No retries: failures surface as ApiError (HTTP status) or as the
underlying requests exception (connection problems).
"""
import logging
from typing import Any, Dict, Optional, Union

import requests

from .config import Config
from .schema import Collection

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000/api"


class ApiError(Exception):
    """Non-2xx response from the board API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class BoardApiClient:
    """Thin wrapper over the /api routes of board_server."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: Optional[float] = None,
                 session: requests.Session = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, cfg: Config, session: requests.Session = None) -> "BoardApiClient":
        timeout = float(cfg.request_timeout) if cfg.request_timeout is not None else None
        return cls(cfg.api_base_url, timeout=timeout, session=session)

    def _request(self, method: str, path: str, payload: Any = None) -> Dict[str, Any]:
        url = f"{self.base_url}/{path}"
        r = self.session.request(method, url, json=payload, timeout=self.timeout)
        if not r.ok:
            try:
                message = r.json().get("error", r.reason)
            except (ValueError, AttributeError):
                message = r.text or r.reason
            logger.warning(f"{method} {url} failed: {r.status_code} {message}")
            raise ApiError(r.status_code, message)
        return r.json()

    def get_board(self) -> Dict[str, Any]:
        return self._request("GET", "board")

    def add_item(self, collection: Union[str, Collection], item: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", Collection.from_str(collection).value, item)

    def update_item(self, collection: Union[str, Collection], item_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"{Collection.from_str(collection).value}/{item_id}", updates)

    def delete_item(self, collection: Union[str, Collection], item_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"{Collection.from_str(collection).value}/{item_id}")

    # ── Per-collection helpers ──────────────────────────────────────────

    def add_sticker(self, sticker):
        return self.add_item(Collection.STICKERS, sticker)

    def update_sticker(self, sticker_id, updates):
        return self.update_item(Collection.STICKERS, sticker_id, updates)

    def delete_sticker(self, sticker_id):
        return self.delete_item(Collection.STICKERS, sticker_id)

    def add_card(self, card):
        return self.add_item(Collection.CARDS, card)

    def update_card(self, card_id, updates):
        return self.update_item(Collection.CARDS, card_id, updates)

    def delete_card(self, card_id):
        return self.delete_item(Collection.CARDS, card_id)

    def add_note(self, note):
        return self.add_item(Collection.NOTES, note)

    def update_note(self, note_id, updates):
        return self.update_item(Collection.NOTES, note_id, updates)

    def delete_note(self, note_id):
        return self.delete_item(Collection.NOTES, note_id)
