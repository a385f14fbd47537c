"""
Query cache for data-access reads.

Keys are "<family>:<user_id>:<part>..." so every entry is scoped to one
caller. Which families a mutation makes stale is declared once, in
INVALIDATION_TABLE, instead of at each call site.

    ALL    drop the whole family for the caller
    BY_ID  drop only the entries keyed by the ids the mutation touched
           (or the whole family when no id is known)
"""
import logging
from typing import Any, Callable, Dict, Iterable, Optional, Sequence

from app.utils.cache import HybridCache, cache as default_cache

logger = logging.getLogger(__name__)

ALL = "all"
BY_ID = "by_id"

INVALIDATION_TABLE: Dict[str, Dict[str, str]] = {
    "study_plan": {
        "study-plans": ALL,
        "study-plan": BY_ID,
        "study-plan-weeks": BY_ID,
        # Session details embed the plan title and subject
        "study-session": ALL,
    },
    "study_plan_week": {
        "study-plan-weeks": BY_ID,
        "study-plan": BY_ID,
    },
    # A day only knows its week, so everything plan-shaped goes
    "study_plan_day": {
        "study-plan-weeks": ALL,
        "study-plan": ALL,
    },
    "study_session": {
        "study-sessions": ALL,
        "study-session": BY_ID,
    },
    "study_material": {
        "study-materials": ALL,
        "study-material": BY_ID,
        "study-session": ALL,
    },
    "goal": {
        "goals": ALL,
        "goal": BY_ID,
        "goal-analytics": ALL,
    },
    "goal_action_item": {
        "goals": ALL,
        "goal": BY_ID,
        "goal-analytics": ALL,
    },
    "goal_note": {
        "goal": BY_ID,
    },
    "profile": {
        "profile": ALL,
    },
    "user_streak": {
        "user-streak": ALL,
    },
}


def families_for(entity: str) -> Dict[str, str]:
    """Families a mutation of `entity` invalidates. Unknown entities are a bug."""
    try:
        return INVALIDATION_TABLE[entity]
    except KeyError:
        raise KeyError(f"No invalidation rule for entity type '{entity}'")


class QueryCache:
    def __init__(self, backend: Optional[HybridCache] = None, ttl: Optional[int] = None):
        self.backend = backend or default_cache
        self.ttl = ttl

    @staticmethod
    def key(family: str, user_id: str, *parts: Any) -> str:
        rendered = ":".join("" if p is None else str(p) for p in parts)
        return f"{family}:{user_id}:{rendered}"

    def get_or_fetch(
        self,
        family: str,
        user_id: str,
        parts: Sequence[Any],
        fetch: Callable[[], Any],
    ) -> Any:
        """Return the cached value for the key, or run fetch() and cache its result."""
        cache_key = self.key(family, user_id, *parts)
        cached = self.backend.get(cache_key)
        if cached is not None:
            return cached

        value = fetch()
        if value is not None:
            self.backend.set(cache_key, value, self.ttl)
        return value

    def invalidate(self, entity: str, user_id: str, ids: Iterable[Optional[str]] = ()) -> None:
        """Mark every query the entity's mutation affects as stale."""
        ids = [i for i in ids if i]
        for family, scope in families_for(entity).items():
            if scope == BY_ID and ids:
                for entity_id in ids:
                    # Detail keys may carry extra parts after the id
                    self.backend.delete_prefix(self.key(family, user_id, entity_id))
            else:
                self.backend.delete_prefix(self.key(family, user_id))
        logger.debug(f"Invalidated {entity} queries for user={user_id} ids={ids}")

    def clear(self) -> None:
        self.backend.clear()


query_cache = QueryCache()
