"""Twilio MMS delivery of Rosa's contact card (vCard)."""

from __future__ import annotations

import httpx
from loguru import logger

from rosa.identity.phone_tokens import normalize_phone
from rosa.settings import RosaSettings

VCARD_BODY = "Save Rosa to your contacts so you always know it's me."


class DeliveryError(RuntimeError):
    """Raised when Twilio refuses or fails to accept a message."""


class TwilioClient:
    def __init__(self, http: httpx.AsyncClient, settings: RosaSettings) -> None:
        self._http = http
        self._settings = settings

    def _messages_url(self) -> str:
        s = self._settings
        return f"{s.twilio_api_base}/2010-04-01/Accounts/{s.twilio_account_sid}/Messages.json"

    async def send_vcard(self, phone: str, user_token: str) -> None:
        """Send the contact card to ``phone``; raises DeliveryError on failure."""
        s = self._settings
        if not (s.twilio_account_sid and s.twilio_auth_token and s.twilio_from_number):
            raise DeliveryError("Twilio is not configured (ROSA_TWILIO_ACCOUNT_SID / _AUTH_TOKEN / _FROM_NUMBER)")

        data = {
            "To": normalize_phone(phone, s.default_country_code),
            "From": s.twilio_from_number,
            "Body": VCARD_BODY,
            "MediaUrl": s.vcard_media_url,
        }
        try:
            resp = await self._http.post(
                self._messages_url(),
                data=data,
                auth=(s.twilio_account_sid, s.twilio_auth_token),
            )
        except httpx.HTTPError as exc:
            raise DeliveryError(f"Twilio request failed: {exc}") from exc

        if resp.status_code >= 400:
            raise DeliveryError(f"Twilio rejected vCard for token={user_token}: {resp.status_code} {resp.text[:200]}")

        try:
            body = resp.json()
        except ValueError:
            body = None
        sid = body.get("sid", "") if isinstance(body, dict) else ""
        logger.info(f"vCard sent to token={user_token} (status={resp.status_code}, message sid={sid or '?'})")
