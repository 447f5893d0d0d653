"""Follow-up URLs that carry an authorized request id to the web app."""

from __future__ import annotations

from enum import Enum as PyEnum
from urllib.parse import urlencode

from rosa.settings import RosaSettings


class LinkAction(str, PyEnum):
    SET = "set"
    GET = "get"


def build_link(settings: RosaSettings, action: LinkAction, arid: str) -> str:
    """``https://app(-dev).rosa.bot/#/<action>?arid=<arid>``"""
    query = urlencode({"arid": arid})
    return f"{settings.app_base_url}/#/{action.value}?{query}"
