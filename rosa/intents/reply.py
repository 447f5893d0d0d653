"""The single outbound artifact of a turn and its one constructor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum as PyEnum
from typing import Any

DIALOG_ACTION_CLOSE = "Close"
CONTENT_TYPE_PLAIN_TEXT = "PlainText"


class FulfillmentState(str, PyEnum):
    FULFILLED = "Fulfilled"
    FAILED = "Failed"


@dataclass(frozen=True, slots=True)
class Reply:
    session_attributes: dict[str, Any] | None
    fulfillment_state: FulfillmentState
    content: str

    def to_lex(self) -> dict[str, Any]:
        return {
            "sessionAttributes": self.session_attributes,
            "dialogAction": {
                "type": DIALOG_ACTION_CLOSE,
                "fulfillmentState": self.fulfillment_state.value,
                "message": {"contentType": CONTENT_TYPE_PLAIN_TEXT, "content": self.content},
            },
        }


def close(
    session_attributes: dict[str, Any] | None,
    fulfillment_state: FulfillmentState,
    message: str,
) -> Reply:
    """Conclude the turn. No slot elicitation, every reply closes the dialog."""
    return Reply(
        session_attributes=session_attributes,
        fulfillment_state=fulfillment_state,
        content=f"{message}",
    )
