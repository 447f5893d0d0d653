"""ApplicationService – classify a spoken application name against a user's inventory."""

from __future__ import annotations

from rapidfuzz import fuzz, process
from sqlalchemy.ext.asyncio import AsyncSession

from rosa.intents.matching import ExactFound, MatchResult, NotFound, SimilarFound, normalize_application
from rosa.settings import RosaSettings
from rosa.storage.repository import ApplicationRepo


class ApplicationService:
    def __init__(self, session: AsyncSession, settings: RosaSettings) -> None:
        self._repo = ApplicationRepo(session)
        self._min_score = settings.similar_match_score

    async def find_application(self, raw_application: str, user_token: str) -> MatchResult:
        """
        1. Normalize the requested name
        2. Exact hit in the user's stored names -> ExactFound
        3. Best fuzzy candidate above the score cutoff -> SimilarFound
        4. Otherwise NotFound
        """
        wanted = normalize_application(raw_application)
        if not wanted:
            return NotFound()

        names = await self._repo.list_names(user_token)
        if wanted in names:
            return ExactFound(wanted)

        best = process.extractOne(wanted, names, scorer=fuzz.WRatio, score_cutoff=self._min_score)
        if best is None:
            return NotFound()
        return SimilarFound(best[0])

    async def register_application(self, user_token: str, raw_application: str) -> str:
        """Record an application for the user (idempotent). Returns the normalized name."""
        name = normalize_application(raw_application)
        if not name:
            raise ValueError("application name is empty")
        if await self._repo.get(user_token, name) is None:
            await self._repo.add(user_token, name)
        return name
