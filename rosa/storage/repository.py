"""Thin data-access helpers on top of SQLAlchemy async sessions.

Each repository is instantiated with a scoped AsyncSession and provides
typed CRUD for one domain aggregate.  Business logic stays in the service layer.
"""

from __future__ import annotations

from sqlalchemy import and_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from rosa.storage.models import StoredApplication, UserToken

# Dialects with INSERT ... ON CONFLICT DO NOTHING
_INSERTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}


# ── identity ──────────────────────────────────────────────────────────────


class UserTokenRepo:
    def __init__(self, s: AsyncSession) -> None:
        self._s = s

    async def get_by_phone_hash(self, phone_hash: str) -> UserToken | None:
        return await self._s.scalar(select(UserToken).where(UserToken.phone_hash == phone_hash))

    async def get_or_create(self, phone_hash: str, token: str) -> UserToken:
        """Insert unless the phone hash is already taken, then return the stored row.

        Concurrent first-sight turns for one phone all get the row from whichever
        insert committed first.
        """
        dialect = self._s.get_bind().dialect.name
        stmt = (
            _INSERTS[dialect](UserToken)
            .values(phone_hash=phone_hash, token=token)
            .on_conflict_do_nothing(index_elements=[UserToken.phone_hash])
        )
        await self._s.execute(stmt)
        row = await self.get_by_phone_hash(phone_hash)
        if row is None:
            raise LookupError(f"user token for {phone_hash[:8]}... vanished after insert")
        return row


# ── applications ──────────────────────────────────────────────────────────


class ApplicationRepo:
    def __init__(self, s: AsyncSession) -> None:
        self._s = s

    async def list_names(self, user_token: str) -> list[str]:
        rows = await self._s.scalars(
            select(StoredApplication.normalized_name)
            .where(StoredApplication.user_token == user_token)
            .order_by(StoredApplication.created_at)
        )
        return list(rows)

    async def get(self, user_token: str, normalized_name: str) -> StoredApplication | None:
        return await self._s.scalar(
            select(StoredApplication).where(
                and_(
                    StoredApplication.user_token == user_token,
                    StoredApplication.normalized_name == normalized_name,
                )
            )
        )

    async def add(self, user_token: str, normalized_name: str) -> StoredApplication:
        app = StoredApplication(user_token=user_token, normalized_name=normalized_name)
        self._s.add(app)
        await self._s.flush()
        return app
