"""Fernet-based authorized request ids.

An ``arid`` is an encrypted, timestamped envelope around
``(phone, normalized application, action)``.  The web app hands it back to
``redeem`` to act on the user's behalf; the phone number cannot be read
out of the id without the key, and ids older than ``arid_ttl_seconds``
are rejected.

The key is read from ROSA_ARID_KEY in the environment / .env file.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass

from cryptography.fernet import Fernet, InvalidToken

from rosa.intents.links import LinkAction
from rosa.intents.matching import normalize_application
from rosa.settings import RosaSettings


class AuthorizedRequestError(RuntimeError):
    """Raised when an arid cannot be issued or redeemed."""


@dataclass(frozen=True, slots=True)
class AuthorizedRequest:
    phone: str
    application: str
    action: LinkAction
    issued_at: int


class AuthorizedRequestIssuer:
    def __init__(self, settings: RosaSettings) -> None:
        if not settings.arid_key:
            raise AuthorizedRequestError(
                "ROSA_ARID_KEY is not set. "
                "Generate one with: python -c \"from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())\""
            )
        self._fernet = Fernet(settings.arid_key.encode())
        self._ttl = settings.arid_ttl_seconds

    def issue(self, phone: str, application: str, action: LinkAction, now: float | None = None) -> str:
        """Issue an arid scoped to one application and one action.

        ``application`` may be raw or already normalized; it is normalized here.
        """
        payload = json.dumps(
            {"p": phone, "a": normalize_application(application), "x": LinkAction(action).value},
            separators=(",", ":"),
        )
        t = int(now if now is not None else time.time())
        return self._fernet.encrypt_at_time(payload.encode(), t).decode()

    def redeem(self, arid: str, action: LinkAction, now: float | None = None) -> AuthorizedRequest:
        """Decrypt and validate an arid for ``action``."""
        t = int(now if now is not None else time.time())
        try:
            token = arid.encode()
            raw = self._fernet.decrypt_at_time(token, self._ttl, t)
            issued_at = self._fernet.extract_timestamp(token)
        except InvalidToken as exc:
            raise AuthorizedRequestError("authorized request is invalid or expired") from exc

        data = json.loads(raw)
        granted = LinkAction(data["x"])
        if granted is not LinkAction(action):
            raise AuthorizedRequestError(
                f"authorized request grants '{granted.value}', not '{LinkAction(action).value}'"
            )
        return AuthorizedRequest(
            phone=data["p"],
            application=data["a"],
            action=granted,
            issued_at=issued_at,
        )
