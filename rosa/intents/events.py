"""Inbound turn event parsed from the Lex V1 fulfillment payload."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class InvalidTurnEvent(ValueError):
    """Raised when an inbound payload lacks the fields a turn needs."""


@dataclass(frozen=True, slots=True)
class TurnEvent:
    """One conversational exchange, read-only to the core."""

    user_id: str  # raw phone number, or a Lex console test id
    intent_name: str
    slots: Mapping[str, str | None] = field(default_factory=dict)
    session_attributes: dict[str, Any] | None = None  # passed through untouched
    input_transcript: str = ""

    # ── platform context (mirrored to analytics) ──
    bot: dict[str, Any] | None = None
    invocation_source: str | None = None
    output_dialog_mode: str | None = None
    request_attributes: dict[str, Any] | None = None

    @classmethod
    def from_lex(cls, payload: Mapping[str, Any]) -> TurnEvent:
        """Build a TurnEvent from a Lex V1 Lambda/fulfillment event.

        See https://docs.aws.amazon.com/lex/latest/dg/lambda-input-response-format.html
        """
        current_intent = payload.get("currentIntent") or {}
        if not isinstance(current_intent, Mapping):
            raise InvalidTurnEvent("event currentIntent is not an object")
        user_id = payload.get("userId")
        intent_name = current_intent.get("name")
        if not user_id:
            raise InvalidTurnEvent("event is missing userId")
        if not intent_name:
            raise InvalidTurnEvent("event is missing currentIntent.name")
        slots = current_intent.get("slots") or {}
        if not isinstance(slots, Mapping):
            raise InvalidTurnEvent("event currentIntent.slots is not an object")
        return cls(
            user_id=str(user_id),
            intent_name=str(intent_name),
            slots=slots,
            session_attributes=payload.get("sessionAttributes"),
            input_transcript=payload.get("inputTranscript") or "",
            bot=payload.get("bot"),
            invocation_source=payload.get("invocationSource"),
            output_dialog_mode=payload.get("outputDialogMode"),
            request_attributes=payload.get("requestAttributes"),
        )

    def slot(self, name: str) -> str:
        return self.slots.get(name) or ""

    def platform_context(self) -> dict[str, Any]:
        """Redacted view of the event for analytics: no userId / phone."""
        return {
            "currentIntent": {"name": self.intent_name, "slots": dict(self.slots)},
            "bot": self.bot,
            "invocationSource": self.invocation_source,
            "outputDialogMode": self.output_dialog_mode,
            "sessionAttributes": self.session_attributes,
            "requestAttributes": self.request_attributes,
        }
