# briefboarder/services/collab.py
from __future__ import annotations

import logging
import secrets
import string
from dataclasses import dataclass
from typing import Any

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..core.config import Settings, get_settings

logger = logging.getLogger(__name__)

FULL_ACCESS = ["room:write"]
_USER_ID_ALPHABET = string.ascii_lowercase + string.digits


class CollaborationError(RuntimeError):
    pass


@dataclass(frozen=True)
class AuthorizeResult:
    status: int
    body: str


def anonymous_user() -> tuple[str, str]:
    """Random (user_id, display name) pair; there are no real accounts yet."""
    user_id = "user-" + "".join(secrets.choice(_USER_ID_ALPHABET) for _ in range(6))
    return user_id, f"User {user_id[5:10]}"


class LiveblocksClient:
    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None) -> None:
        self.secret_key = settings.LIVEBLOCKS_SECRET_KEY
        self.base_url = settings.LIVEBLOCKS_BASE_URL.rstrip("/")
        self._transport = transport

    @retry(
        wait=wait_exponential(multiplier=1, min=1, max=10),
        stop=stop_after_attempt(3),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    def _post(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        with httpx.Client(
            base_url=self.base_url,
            timeout=10,
            transport=self._transport,
        ) as client:
            return client.post(
                path,
                json=payload,
                headers={"Authorization": f"Bearer {self.secret_key}"},
            )

    def authorize(self, room: str) -> AuthorizeResult:
        """
        Issue an access-token session with full access to `room`.

        The provider's status and body are passed through untouched so the
        browser SDK can consume them directly.
        """
        if not self.secret_key:
            raise CollaborationError("LIVEBLOCKS_SECRET_KEY is not configured")

        user_id, user_name = anonymous_user()
        try:
            resp = self._post(
                "/authorize-user",
                {
                    "userId": user_id,
                    "userInfo": {"name": user_name},
                    "permissions": {room: FULL_ACCESS},
                },
            )
        except httpx.HTTPError as e:
            raise CollaborationError(f"Liveblocks authorize failed: {e}") from e

        logger.info(
            "Collaboration session issued for %s (status %d)",
            room,
            resp.status_code,
            extra={"step": "liveblocks_auth"},
        )
        return AuthorizeResult(status=resp.status_code, body=resp.text)


def authorize_room(room: str) -> AuthorizeResult:
    return LiveblocksClient(get_settings()).authorize(room)
