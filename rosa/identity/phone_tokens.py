"""Phone token service: stable opaque tokens for phone identities.

Phones are normalized to E.164 and stored only as an HMAC-SHA256 digest;
the token itself is random and carries no trace of the number.
"""

from __future__ import annotations

import hashlib
import hmac
import re
import secrets

from sqlalchemy.ext.asyncio import AsyncSession

from rosa.settings import RosaSettings
from rosa.storage.repository import UserTokenRepo

_NON_DIGIT_RE = re.compile(r"\D+")


class IdentityError(RuntimeError):
    """Raised when a phone identity cannot be resolved."""


def normalize_phone(phone: str, default_country_code: str = "1") -> str:
    """Normalize a phone-like string to E.164 (``+<country><number>``)."""
    digits = _NON_DIGIT_RE.sub("", phone or "")
    if not digits:
        raise IdentityError(f"not a phone number: {phone!r}")
    if len(digits) == 10 and default_country_code == "1":
        digits = default_country_code + digits
    return "+" + digits


def _generate_token() -> str:
    return secrets.token_hex(16)


class PhoneTokenService:
    def __init__(self, session: AsyncSession, settings: RosaSettings) -> None:
        if not settings.usertoken_hash_hmac:
            raise IdentityError("ROSA_USERTOKEN_HASH_HMAC is not set.")
        self._repo = UserTokenRepo(session)
        self._secret = settings.usertoken_hash_hmac.encode()
        self._country_code = settings.default_country_code

    def phone_hash(self, phone: str) -> str:
        e164 = normalize_phone(phone, self._country_code)
        return hmac.new(self._secret, e164.encode(), hashlib.sha256).hexdigest()

    async def token_exists_for_phone(self, phone: str) -> bool:
        return await self._repo.get_by_phone_hash(self.phone_hash(phone)) is not None

    async def token_for_phone(self, phone: str) -> str:
        """Return the phone's token, creating it on first sight."""
        phone_hash = self.phone_hash(phone)
        existing = await self._repo.get_by_phone_hash(phone_hash)
        if existing is not None:
            return existing.token
        # A concurrent turn may insert first; its token wins.
        stored = await self._repo.get_or_create(phone_hash, _generate_token())
        return stored.token
