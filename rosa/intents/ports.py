"""Collaborator contracts the intent core depends on."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from rosa.intents.links import LinkAction
from rosa.intents.matching import MatchResult


class IdentityResolver(Protocol):
    async def token_exists_for_phone(self, phone: str) -> bool: ...

    async def token_for_phone(self, phone: str) -> str: ...


class ApplicationMatcher(Protocol):
    async def find_application(self, raw_application: str, user_token: str) -> MatchResult: ...


class LinkIssuer(Protocol):
    def issue(self, phone: str, application: str, action: LinkAction) -> str: ...


class ContactCardDelivery(Protocol):
    async def send_vcard(self, phone: str, user_token: str) -> None: ...


class Analytics(Protocol):
    async def log_incoming(self, user_token: str, text: str, platform_json: Mapping[str, Any]) -> None: ...

    async def log_outgoing(self, user_token: str, text: str, platform_json: Mapping[str, Any]) -> None: ...


class Templates(Protocol):
    async def render(self, template_name: str, view: Mapping[str, Any] | None = None) -> str: ...
