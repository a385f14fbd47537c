"""
Transient toast notifications emitted by data-access mutations.

Every mutation reports its outcome here, success or failure, the same way a
UI hook would raise a banner. Toasts live in the hybrid cache for a few
seconds per caller and are drained by GET /api/toasts.
"""
import os
import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import List, Optional

from app.utils.cache import HybridCache, cache as default_cache

logger = logging.getLogger(__name__)

TOAST_TTL_SECONDS = int(os.getenv("TOAST_TTL_SECONDS", "30"))
MAX_TOASTS_PER_USER = 20


@dataclass
class Toast:
    title: str
    description: str
    variant: str = "default"  # "default" | "destructive"
    created_at: str = ""

    def __post_init__(self):
        if not self.created_at:
            self.created_at = datetime.utcnow().isoformat()


class Toaster:
    def __init__(self, backend: Optional[HybridCache] = None, ttl: int = TOAST_TTL_SECONDS):
        self.backend = backend or default_cache
        self.ttl = ttl

    @staticmethod
    def _key(user_id: str) -> str:
        return f"toasts:{user_id}"

    def notify(self, user_id: Optional[str], title: str, description: str, variant: str = "default") -> Toast:
        toast = Toast(title=title, description=description, variant=variant)
        log = logger.warning if variant == "destructive" else logger.info
        log(f"[toast] user={user_id} {title}: {description}")

        if user_id:
            pending = self.backend.get(self._key(user_id)) or []
            pending.append(asdict(toast))
            self.backend.set(self._key(user_id), pending[-MAX_TOASTS_PER_USER:], self.ttl)
        return toast

    def success(self, user_id: Optional[str], title: str, description: str) -> Toast:
        return self.notify(user_id, title, description)

    def error(self, user_id: Optional[str], title: str, error: Exception, fallback: str) -> Toast:
        """Failure banner carrying the raw backend message."""
        return self.notify(user_id, title, str(error) or fallback, variant="destructive")

    def peek(self, user_id: str) -> List[dict]:
        return self.backend.get(self._key(user_id)) or []

    def drain(self, user_id: str) -> List[dict]:
        pending = self.peek(user_id)
        self.backend.delete(self._key(user_id))
        return pending


toaster = Toaster()
