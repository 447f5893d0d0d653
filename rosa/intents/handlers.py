"""Per-intent reply strategies."""

from __future__ import annotations

from typing import assert_never

from loguru import logger

from rosa.intents.events import TurnEvent
from rosa.intents.links import LinkAction, build_link
from rosa.intents.matching import ExactFound, NotFound, SimilarFound
from rosa.intents.ports import ApplicationMatcher, ContactCardDelivery, LinkIssuer, Templates
from rosa.intents.reply import FulfillmentState, Reply, close
from rosa.settings import RosaSettings

APPLICATION_SLOT = "Application"


class IntentHandlers:
    """One coroutine per supported intent, each returning a closed Reply."""

    def __init__(
        self,
        settings: RosaSettings,
        templates: Templates,
        matcher: ApplicationMatcher,
        issuer: LinkIssuer,
        delivery: ContactCardDelivery,
    ) -> None:
        self._settings = settings
        self._templates = templates
        self._matcher = matcher
        self._issuer = issuer
        self._delivery = delivery

    async def hello(self, event: TurnEvent, user_token: str, first_time: bool) -> Reply:
        # First-time status is derived from token existence; nothing is written back here.
        template = "hello-firsttime.tmpl" if first_time else "hello.tmpl"
        msg = await self._templates.render(template)
        if first_time:
            await self._delivery.send_vcard(event.user_id, user_token)
        return close(event.session_attributes, FulfillmentState.FULFILLED, msg)

    async def send_vcard(self, event: TurnEvent, user_token: str) -> Reply:
        await self._delivery.send_vcard(event.user_id, user_token)
        msg = await self._templates.render("vcard.tmpl")
        return close(event.session_attributes, FulfillmentState.FULFILLED, msg)

    async def help(self, event: TurnEvent) -> Reply:
        msg = await self._templates.render("help.tmpl")
        return close(event.session_attributes, FulfillmentState.FULFILLED, msg)

    async def store_password(self, event: TurnEvent) -> Reply:
        raw_application = event.slot(APPLICATION_SLOT)
        arid = self._issuer.issue(event.user_id, raw_application, LinkAction.SET)
        msg = await self._templates.render(
            "store.tmpl",
            {
                "rawApplication": raw_application,
                "url": build_link(self._settings, LinkAction.SET, arid),
            },
        )
        return close(event.session_attributes, FulfillmentState.FULFILLED, msg)

    async def retrieve_password(self, event: TurnEvent, user_token: str) -> Reply:
        raw_application = event.slot(APPLICATION_SLOT)
        found = await self._matcher.find_application(raw_application, user_token)
        logger.debug(f"Application match for token={user_token}: {found!r}")

        if isinstance(found, NotFound):
            msg = await self._templates.render("retrieve-notfound.tmpl", {"rawApplication": raw_application})
            return close(event.session_attributes, FulfillmentState.FULFILLED, msg)

        if isinstance(found, ExactFound):
            template = "retrieve.tmpl"
        elif isinstance(found, SimilarFound):
            template = "retrieve-similarfound.tmpl"
        else:
            assert_never(found)

        # Already normalized by the matcher; the issuer's normalization leaves it unchanged.
        arid = self._issuer.issue(event.user_id, found.normalized_application, LinkAction.GET)
        msg = await self._templates.render(
            template,
            {
                "rawApplication": raw_application,
                "url": build_link(self._settings, LinkAction.GET, arid),
            },
        )
        return close(event.session_attributes, FulfillmentState.FULFILLED, msg)
