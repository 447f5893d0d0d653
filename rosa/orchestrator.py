"""TurnOrchestrator – runs one conversational turn end to end.

Pipeline (strictly sequential, each stage awaited):

    test override -> identity -> analytics in -> dispatch -> analytics out -> reply
"""

from __future__ import annotations

import dataclasses

import httpx
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from rosa.applications.service import ApplicationService
from rosa.authorization.authorized_request import AuthorizedRequestIssuer
from rosa.identity.phone_tokens import PhoneTokenService
from rosa.intents.dispatcher import IntentDispatcher
from rosa.intents.events import TurnEvent
from rosa.intents.handlers import IntentHandlers
from rosa.intents.ports import Analytics, IdentityResolver
from rosa.intents.reply import Reply
from rosa.providers.dashbot import DashbotClient
from rosa.providers.twilio import TwilioClient
from rosa.settings import RosaSettings
from rosa.templating.store import TemplateStore

TEST_USER_ID_MIN_LENGTH = 32


def is_test_user_id(user_id: str) -> bool:
    """Lex console sessions use ids like ``vku38bqtk0388hdr74stria0ba0y7s4f``."""
    return len(user_id) >= TEST_USER_ID_MIN_LENGTH and user_id[:1].isascii() and user_id[:1].isalpha()


class TurnOrchestrator:
    def __init__(
        self,
        settings: RosaSettings,
        identity: IdentityResolver,
        analytics: Analytics,
        dispatcher: IntentDispatcher,
    ) -> None:
        self._settings = settings
        self._identity = identity
        self._analytics = analytics
        self._dispatcher = dispatcher

    def apply_test_override(self, event: TurnEvent) -> TurnEvent:
        if not is_test_user_id(event.user_id):
            return event
        logger.warning(f"Test usage detected, overriding userId to {self._settings.test_phone}")
        return dataclasses.replace(event, user_id=self._settings.test_phone)

    async def handle(self, event: TurnEvent) -> Reply:
        """Run one turn. Collaborator failures propagate; no partial reply is produced."""
        event = self.apply_test_override(event)
        phone = event.user_id

        exists = await self._identity.token_exists_for_phone(phone)
        first_time = not exists
        user_token = await self._identity.token_for_phone(phone)

        platform_json = event.platform_context()
        await self._analytics.log_incoming(user_token, event.input_transcript, platform_json)

        reply = await self._dispatcher.dispatch(event.intent_name, first_time, event, user_token)

        await self._analytics.log_outgoing(user_token, reply.content, platform_json)
        return reply


def build_orchestrator(
    settings: RosaSettings,
    session: AsyncSession,
    http: httpx.AsyncClient,
    templates: TemplateStore | None = None,
) -> TurnOrchestrator:
    """Wire the production collaborators around one DB session."""
    handlers = IntentHandlers(
        settings=settings,
        templates=templates or TemplateStore(),
        matcher=ApplicationService(session, settings),
        issuer=AuthorizedRequestIssuer(settings),
        delivery=TwilioClient(http, settings),
    )
    return TurnOrchestrator(
        settings=settings,
        identity=PhoneTokenService(session, settings),
        analytics=DashbotClient(http, settings),
        dispatcher=IntentDispatcher(handlers),
    )
