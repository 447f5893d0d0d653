from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from cryptography.fernet import Fernet
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from rosa.settings import RosaSettings
from rosa.storage.models import Base


def make_settings(**overrides: object) -> RosaSettings:
    values: dict[str, object] = {
        "env": "dev",
        "database_url": "sqlite+aiosqlite://",
        "usertoken_hash_hmac": "test-hmac-secret",
        "arid_key": Fernet.generate_key().decode(),
        "twilio_account_sid": "AC123",
        "twilio_auth_token": "tw-secret",
        "twilio_from_number": "+15550001111",
        "dashbot_api_key": "db-key",
    }
    values.update(overrides)
    return RosaSettings(_env_file=None, **values)


@pytest.fixture
def settings() -> RosaSettings:
    return make_settings()


@pytest_asyncio.fixture
async def session() -> AsyncIterator[AsyncSession]:
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(bind=engine, expire_on_commit=False)
    async with factory() as s:
        yield s
    await engine.dispose()
