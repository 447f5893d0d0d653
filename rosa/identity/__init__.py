"""Phone identity -> opaque user token."""

from rosa.identity.phone_tokens import PhoneTokenService, normalize_phone

__all__ = ["PhoneTokenService", "normalize_phone"]
