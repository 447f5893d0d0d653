"""Stateless routing from intent name to reply strategy."""

from __future__ import annotations

import json
from enum import Enum as PyEnum
from typing import assert_never

from loguru import logger

from rosa.intents.events import TurnEvent
from rosa.intents.handlers import IntentHandlers
from rosa.intents.reply import FulfillmentState, Reply, close

UNHANDLED_INTENT_MESSAGE = "Sorry I'm not sure how to help with that."


class Intent(str, PyEnum):
    HELLO = "Hello"
    SEND_VCARD = "SendVcard"
    HELP = "Help"
    STORE_PASSWORD = "StorePassword"
    RETRIEVE_PASSWORD = "RetrievePassword"


class IntentDispatcher:
    """Selects a handler by intent name.

    Unknown intents are not errors: they close the turn as ``Failed`` with a
    fixed apology and the session attributes echoed back.
    """

    def __init__(self, handlers: IntentHandlers) -> None:
        self._handlers = handlers

    async def dispatch(self, intent_name: str, first_time: bool, event: TurnEvent, user_token: str) -> Reply:
        logger.info(f"Request received for token={user_token}, intentName={intent_name}")
        logger.debug(f"slots: {json.dumps(dict(event.slots))}")

        try:
            intent = Intent(intent_name)
        except ValueError:
            logger.error(f"Unhandled intent received: {intent_name}")
            return close(event.session_attributes, FulfillmentState.FAILED, UNHANDLED_INTENT_MESSAGE)

        h = self._handlers
        if intent is Intent.HELLO:
            return await h.hello(event, user_token, first_time)
        if intent is Intent.SEND_VCARD:
            return await h.send_vcard(event, user_token)
        if intent is Intent.HELP:
            return await h.help(event)
        if intent is Intent.STORE_PASSWORD:
            return await h.store_password(event)
        if intent is Intent.RETRIEVE_PASSWORD:
            return await h.retrieve_password(event, user_token)
        assert_never(intent)
