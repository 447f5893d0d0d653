"""Dashbot analytics mirror (generic REST platform).

Every turn is mirrored twice: the inbound transcript before dispatch and the
reply text after it.  ``platform_json`` is the redacted event context; the
raw phone number never goes out, the user is identified by token.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx
from loguru import logger

from rosa.settings import RosaSettings

DASHBOT_PLATFORM = "generic"
DASHBOT_API_VERSION = "10.1.1-rest"


class DashbotClient:
    def __init__(self, http: httpx.AsyncClient, settings: RosaSettings) -> None:
        self._http = http
        self._url = settings.dashbot_url
        self._api_key = settings.dashbot_api_key
        self._warned = False

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    async def log_incoming(self, user_token: str, text: str, platform_json: Mapping[str, Any]) -> None:
        await self._track("incoming", user_token, text, platform_json)

    async def log_outgoing(self, user_token: str, text: str, platform_json: Mapping[str, Any]) -> None:
        await self._track("outgoing", user_token, text, platform_json)

    async def _track(self, kind: str, user_token: str, text: str, platform_json: Mapping[str, Any]) -> None:
        if not self.enabled:
            if not self._warned:
                logger.warning("ROSA_DASHBOT_API_KEY not set, analytics mirroring disabled")
                self._warned = True
            return

        params = {
            "platform": DASHBOT_PLATFORM,
            "v": DASHBOT_API_VERSION,
            "type": kind,
            "apiKey": self._api_key,
        }
        body = {"text": text, "userId": user_token, "platformJson": dict(platform_json)}
        resp = await self._http.post(self._url, params=params, json=body)
        resp.raise_for_status()
        logger.debug(f"Dashbot {kind} logged for token={user_token} ({len(text)} chars)")
