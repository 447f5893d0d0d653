"""Intent dispatch core: events, handlers, replies and authorized links."""

from rosa.intents.dispatcher import Intent, IntentDispatcher
from rosa.intents.events import InvalidTurnEvent, TurnEvent
from rosa.intents.handlers import IntentHandlers
from rosa.intents.reply import FulfillmentState, Reply

__all__ = [
    "FulfillmentState",
    "Intent",
    "IntentDispatcher",
    "IntentHandlers",
    "InvalidTurnEvent",
    "Reply",
    "TurnEvent",
]
