"""Authorized request ids (arid) for the web follow-up flow."""

from rosa.authorization.authorized_request import (
    AuthorizedRequest,
    AuthorizedRequestError,
    AuthorizedRequestIssuer,
)

__all__ = ["AuthorizedRequest", "AuthorizedRequestError", "AuthorizedRequestIssuer"]
