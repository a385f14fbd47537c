"""
Explicit caller context passed into every data-access call.

There is no ambient "current user": routes build a SessionContext from the
request and hand it to the services, which resolve the owner id from it.
"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from app.services.exceptions import Unauthenticated


@dataclass(frozen=True)
class SessionContext:
    db: Session
    user_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    def require_user(self) -> str:
        """Return the caller id or raise Unauthenticated."""
        if not self.user_id:
            raise Unauthenticated()
        return self.user_id
