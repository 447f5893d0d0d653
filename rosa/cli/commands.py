"""CLI commands for Rosa."""

import asyncio
import json
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from rosa import __logo__, __version__

app = typer.Typer(
    name="rosa",
    help=f"{__logo__} Rosa - password butler over SMS",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} Rosa v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """Rosa - password butler over SMS."""
    pass


# ============================================================================
# Status
# ============================================================================


def _configured(value: str) -> str:
    return "[green]✓[/green]" if value else "[dim]not set[/dim]"


@app.command()
def status():
    """Show Rosa configuration status."""
    from rosa.settings import get_settings

    s = get_settings()
    console.print(f"{__logo__} Rosa Status\n")

    table = Table(show_header=False, box=None)
    table.add_row("Environment", s.env)
    table.add_row("Web app", s.app_base_url)
    table.add_row("Database", s.database_url.split("@")[-1])
    table.add_row("Token HMAC", _configured(s.usertoken_hash_hmac))
    table.add_row("arid key", _configured(s.arid_key))
    table.add_row("Dashbot", _configured(s.dashbot_api_key))
    table.add_row("Twilio", _configured(s.twilio_account_sid and s.twilio_auth_token and s.twilio_from_number))
    console.print(table)


# ============================================================================
# Turn (run one Lex turn locally)
# ============================================================================


def _parse_slots(values: list[str]) -> dict[str, str]:
    slots: dict[str, str] = {}
    for item in values:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise typer.BadParameter(f"slot must be NAME=VALUE, got {item!r}")
        slots[name.strip()] = value.strip()
    return slots


def _lex_event(user_id: str, intent: str, slots: dict[str, str], text: str) -> dict[str, Any]:
    return {
        "userId": user_id,
        "inputTranscript": text,
        "invocationSource": "FulfillmentCodeHook",
        "outputDialogMode": "Text",
        "currentIntent": {"name": intent, "slots": slots, "confirmationStatus": "None"},
        "bot": {"name": "Rosa", "alias": "$LATEST", "version": "$LATEST"},
        "sessionAttributes": {},
        "requestAttributes": None,
    }


@app.command()
def turn(
    intent: str = typer.Option(..., "--intent", "-i", help="Intent name, e.g. StorePassword"),
    user: str = typer.Option("12125551212", "--user", "-u", help="Phone number (Lex userId)"),
    slot: list[str] = typer.Option([], "--slot", "-s", help="Slot as NAME=VALUE (repeatable)"),
    text: str = typer.Option("", "--text", "-t", help="Input transcript for analytics"),
):
    """Run a single turn against the configured services and print the Lex reply."""
    import httpx

    from rosa.intents.events import TurnEvent
    from rosa.orchestrator import build_orchestrator
    from rosa.settings import get_settings
    from rosa.storage.database import build_engine, build_session_factory, create_all_tables, session_scope

    settings = get_settings()
    event = TurnEvent.from_lex(_lex_event(user, intent, _parse_slots(slot), text))

    async def run() -> dict[str, Any]:
        engine = build_engine(settings)
        try:
            await create_all_tables(engine)
            async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as http:
                async with session_scope(build_session_factory(engine)) as session:
                    reply = await build_orchestrator(settings, session, http).handle(event)
            return reply.to_lex()
        finally:
            await engine.dispose()

    console.print_json(json.dumps(asyncio.run(run())))


# ============================================================================
# Serve (FastAPI HTTP)
# ============================================================================


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind host (default: ROSA_HOST)"),
    port: int = typer.Option(None, "--port", "-p", help="Bind port (default: ROSA_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
):
    """Start the Rosa HTTP API server (FastAPI + Uvicorn)."""
    import uvicorn

    from rosa.settings import get_settings

    s = get_settings()
    host = host or s.host
    port = port or s.port
    console.print(f"{__logo__} Starting Rosa API on {host}:{port} ...")
    uvicorn.run(
        "rosa.api.app:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


if __name__ == "__main__":
    app()
