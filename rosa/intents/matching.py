"""Application-name normalization and the three-way match result."""

from __future__ import annotations

import re
from dataclasses import dataclass

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def normalize_application(name: str) -> str:
    """Canonical form of a free-text application name.

    Lowercase with everything but ASCII letters and digits removed, so
    ``"Net Flix!"`` and ``"netflix"`` compare equal.  Idempotent.
    """
    return _NON_ALNUM_RE.sub("", (name or "").lower())


@dataclass(frozen=True, slots=True)
class NotFound:
    """No stored application resembles the requested name."""


@dataclass(frozen=True, slots=True)
class ExactFound:
    normalized_application: str


@dataclass(frozen=True, slots=True)
class SimilarFound:
    """A stored application is close to, but not equal to, the request."""

    normalized_application: str


MatchResult = NotFound | ExactFound | SimilarFound
