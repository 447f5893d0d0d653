from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from rosa.applications.service import ApplicationService
from rosa.authorization.authorized_request import AuthorizedRequestIssuer
from rosa.identity.phone_tokens import PhoneTokenService
from rosa.intents.dispatcher import IntentDispatcher
from rosa.intents.events import TurnEvent
from rosa.intents.handlers import IntentHandlers
from rosa.intents.links import LinkAction
from rosa.intents.reply import FulfillmentState
from rosa.orchestrator import TurnOrchestrator, is_test_user_id
from rosa.settings import RosaSettings
from rosa.templating.store import TemplateStore

LEX_TEST_USER = "vku38bqtk0388hdr74stria0ba0y7s4f"


@dataclass
class Journal:
    """Shared, ordered record of every collaborator call in a turn."""

    entries: list[tuple[str, Any]] = field(default_factory=list)

    def names(self) -> list[str]:
        return [name for name, _ in self.entries]


@dataclass
class FakeIdentity:
    journal: Journal
    known: set[str] = field(default_factory=set)

    async def token_exists_for_phone(self, phone: str) -> bool:
        self.journal.entries.append(("identity.exists", phone))
        return phone in self.known

    async def token_for_phone(self, phone: str) -> str:
        self.journal.entries.append(("identity.token", phone))
        self.known.add(phone)
        return f"tok-{phone[-4:]}"


@dataclass
class FakeAnalytics:
    journal: Journal

    async def log_incoming(self, user_token: str, text: str, platform_json: Mapping[str, Any]) -> None:
        self.journal.entries.append(("analytics.in", (user_token, text, dict(platform_json))))

    async def log_outgoing(self, user_token: str, text: str, platform_json: Mapping[str, Any]) -> None:
        self.journal.entries.append(("analytics.out", (user_token, text, dict(platform_json))))


@dataclass
class FakeDelivery:
    journal: Journal

    async def send_vcard(self, phone: str, user_token: str) -> None:
        self.journal.entries.append(("delivery.vcard", (phone, user_token)))


@dataclass
class RecordingTemplates:
    journal: Journal
    store: TemplateStore = field(default_factory=TemplateStore)

    async def render(self, template_name: str, view: Mapping[str, Any] | None = None) -> str:
        self.journal.entries.append(("template", template_name))
        return await self.store.render(template_name, view)


def _orchestrator(
    settings: RosaSettings,
    session: AsyncSession,
    journal: Journal,
    identity: FakeIdentity | None = None,
) -> tuple[TurnOrchestrator, AuthorizedRequestIssuer, ApplicationService]:
    issuer = AuthorizedRequestIssuer(settings)
    apps = ApplicationService(session, settings)
    handlers = IntentHandlers(
        settings=settings,
        templates=RecordingTemplates(journal),
        matcher=apps,
        issuer=issuer,
        delivery=FakeDelivery(journal),
    )
    orchestrator = TurnOrchestrator(
        settings=settings,
        identity=identity or FakeIdentity(journal),
        analytics=FakeAnalytics(journal),
        dispatcher=IntentDispatcher(handlers),
    )
    return orchestrator, issuer, apps


def _event(intent: str, user_id: str = "15551234567", **slots: str) -> TurnEvent:
    return TurnEvent(
        user_id=user_id,
        intent_name=intent,
        slots=slots,
        session_attributes={"conversation": "x"},
        input_transcript=f"{intent} please",
    )


def _arid(url_text: str) -> str:
    m = re.search(r"https://app-dev\.rosa\.bot/#/(set|get)\?arid=(\S+)", url_text)
    assert m is not None, url_text
    return unquote(m.group(2))


@pytest.mark.parametrize(
    "user_id,expected",
    [
        (LEX_TEST_USER, True),
        ("V" + "1" * 31, True),
        ("1" + "a" * 31, False),
        ("vku38bqtk0388hdr74stria0ba0y7s4", False),  # 31 chars
        ("15551234567", False),
    ],
)
def test_is_test_user_id(user_id: str, expected: bool) -> None:
    assert is_test_user_id(user_id) is expected


@pytest.mark.asyncio
async def test_pipeline_order_is_identity_in_dispatch_out(session: AsyncSession, settings: RosaSettings) -> None:
    journal = Journal()
    orchestrator, _, _ = _orchestrator(settings, session, journal)

    reply = await orchestrator.handle(_event("Hello"))

    assert journal.names() == [
        "identity.exists",
        "identity.token",
        "analytics.in",
        "template",
        "delivery.vcard",
        "analytics.out",
    ]
    assert journal.entries[-1][1][1] == reply.content


@pytest.mark.asyncio
async def test_first_time_is_derived_from_token_existence(session: AsyncSession, settings: RosaSettings) -> None:
    journal = Journal()
    identity = FakeIdentity(journal)
    orchestrator, _, _ = _orchestrator(settings, session, journal, identity=identity)

    await orchestrator.handle(_event("Hello"))
    await orchestrator.handle(_event("Hello"))

    assert journal.names().count("delivery.vcard") == 1
    templates = [value for name, value in journal.entries if name == "template"]
    assert templates == ["hello-firsttime.tmpl", "hello.tmpl"]


@pytest.mark.asyncio
async def test_analytics_never_sees_the_phone(session: AsyncSession, settings: RosaSettings) -> None:
    journal = Journal()
    orchestrator, _, _ = _orchestrator(settings, session, journal)

    await orchestrator.handle(_event("Help"))

    for name, (token, _text, context) in (e for e in journal.entries if e[0].startswith("analytics")):
        assert token == "tok-4567"
        assert "15551234567" not in repr(context), name


@pytest.mark.asyncio
async def test_store_password_scenario(session: AsyncSession, settings: RosaSettings) -> None:
    journal = Journal()
    orchestrator, issuer, _ = _orchestrator(settings, session, journal)

    reply = await orchestrator.handle(_event("StorePassword", Application="Netflix"))

    assert reply.fulfillment_state is FulfillmentState.FULFILLED
    assert "Netflix" in reply.content
    assert len(re.findall(r"arid=", reply.content)) == 1
    request = issuer.redeem(_arid(reply.content), LinkAction.SET)
    assert request.phone == "15551234567"
    assert request.application == "netflix"
    assert reply.to_lex()["dialogAction"]["type"] == "Close"


@pytest.mark.asyncio
async def test_retrieve_similar_scenario_links_normalized_name(session: AsyncSession, settings: RosaSettings) -> None:
    journal = Journal()
    orchestrator, issuer, apps = _orchestrator(settings, session, journal)
    await apps.register_application("tok-4567", "Netflix")

    reply = await orchestrator.handle(_event("RetrievePassword", Application="netfl"))

    assert ("template", "retrieve-similarfound.tmpl") in journal.entries
    assert "netfl" in reply.content
    request = issuer.redeem(_arid(reply.content), LinkAction.GET)
    assert request.application == "netflix"


@pytest.mark.asyncio
async def test_retrieve_not_found_has_no_link(session: AsyncSession, settings: RosaSettings) -> None:
    journal = Journal()
    orchestrator, _, _ = _orchestrator(settings, session, journal)

    reply = await orchestrator.handle(_event("RetrievePassword", Application="Spotify"))

    assert ("template", "retrieve-notfound.tmpl") in journal.entries
    assert "arid=" not in reply.content
    assert reply.fulfillment_state is FulfillmentState.FULFILLED


@pytest.mark.asyncio
async def test_lex_console_user_is_replaced_by_test_phone(session: AsyncSession, settings: RosaSettings) -> None:
    journal = Journal()
    orchestrator, issuer, _ = _orchestrator(settings, session, journal)

    reply = await orchestrator.handle(_event("StorePassword", user_id=LEX_TEST_USER, Application="Hulu"))

    phones = [value for name, value in journal.entries if name.startswith("identity")]
    assert phones == [settings.test_phone, settings.test_phone]
    assert issuer.redeem(_arid(reply.content), LinkAction.SET).phone == settings.test_phone


@pytest.mark.asyncio
async def test_unknown_intent_still_mirrors_both_ways(session: AsyncSession, settings: RosaSettings) -> None:
    journal = Journal()
    orchestrator, _, _ = _orchestrator(settings, session, journal)

    reply = await orchestrator.handle(_event("OrderPizza"))

    assert reply.fulfillment_state is FulfillmentState.FAILED
    assert journal.names() == ["identity.exists", "identity.token", "analytics.in", "analytics.out"]


@pytest.mark.asyncio
async def test_failing_analytics_aborts_before_dispatch(session: AsyncSession, settings: RosaSettings) -> None:
    journal = Journal()
    orchestrator, _, _ = _orchestrator(settings, session, journal)

    class BrokenAnalytics(FakeAnalytics):
        async def log_incoming(self, user_token: str, text: str, platform_json: Mapping[str, Any]) -> None:
            raise RuntimeError("dashbot down")

    orchestrator._analytics = BrokenAnalytics(journal)

    with pytest.raises(RuntimeError, match="dashbot down"):
        await orchestrator.handle(_event("Help"))
    assert "template" not in journal.names()


@pytest.mark.asyncio
async def test_real_phone_token_service_drives_first_time(session: AsyncSession, settings: RosaSettings) -> None:
    journal = Journal()
    orchestrator, _, _ = _orchestrator(settings, session, journal)
    orchestrator._identity = PhoneTokenService(session, settings)

    await orchestrator.handle(_event("Hello"))
    await orchestrator.handle(_event("Hello", user_id="+1 (555) 123-4567"))

    assert journal.names().count("delivery.vcard") == 1
