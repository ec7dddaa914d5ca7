from collections.abc import Iterable

from recollect.constants import SEARCH_PATTERNS_KEY, SUGGESTION_LIMIT
from recollect.logging import get_logger
from recollect.memory.models import SearchPattern
from recollect.memory.store import CachedListRepository
from recollect.utils import clamp_score, utc_now

_logger = get_logger(__name__)


def _union(existing: list[str], incoming: Iterable[str]) -> list[str]:
    merged = list(existing)
    for t in incoming:
        if t not in merged:
            merged.append(t)
    return merged


class SearchPatternLearner(CachedListRepository[SearchPattern]):
    """Frequency/recency model over past queries, keyed case-insensitively.

    Repeat queries keep the display casing of their first occurrence. The
    running relevance is the two-point average (previous + new) / 2, which
    weights recent searches more heavily than a true mean would.
    """

    key = SEARCH_PATTERNS_KEY
    model = SearchPattern

    async def patterns(self) -> list[SearchPattern]:
        return list(await self._load())

    async def get(self, query: str) -> SearchPattern | None:
        identity = query.lower()
        for p in await self._load():
            if p.identity == identity:
                return p
        return None

    async def record(self, query: str, result_types: Iterable[str], relevance_score: float) -> SearchPattern:
        patterns = await self._load()
        identity = query.lower()
        score = clamp_score(relevance_score)
        now = utc_now()

        for i, existing in enumerate(patterns):
            if existing.identity == identity:
                pattern = existing.model_copy(
                    update={
                        "frequency": existing.frequency + 1,
                        "last_used": now,
                        "result_types": _union(existing.result_types, result_types),
                        "avg_relevance": (existing.avg_relevance + score) / 2,
                    }
                )
                patterns[i] = pattern
                break
        else:
            pattern = SearchPattern(
                query=query,
                frequency=1,
                last_used=now,
                result_types=_union([], result_types),
                avg_relevance=score,
            )
            patterns.append(pattern)

        await self._store(patterns)
        _logger.debug("Recorded search pattern %r (frequency=%d)", pattern.query, pattern.frequency)
        return pattern

    async def suggest(self, partial_query: str, limit: int = SUGGESTION_LIMIT) -> list[str]:
        needle = partial_query.lower()
        matches = [p for p in await self._load() if needle in p.identity]
        matches.sort(key=lambda p: p.frequency, reverse=True)
        return [p.query for p in matches[:limit]]
