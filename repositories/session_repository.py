"""
Session Repository - persistence of storefront visitor state
"""

from typing import Any, Optional
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import StorefrontSession


class SessionRepository(BaseRepository[StorefrontSession]):
    """Repository for storefront session rows"""

    def __init__(self, db: Session):
        super().__init__(db, StorefrontSession)

    def upsert(
        self,
        session_id: str,
        token: Optional[str],
        user: Optional[dict],
        cart: dict[str, Any],
        chat: list,
    ) -> StorefrontSession:
        """Create or overwrite the stored snapshot of a session"""
        row = self.get_by_id(session_id) or StorefrontSession(session_id=session_id)
        row.token = token
        row.user = user
        row.cart = cart
        row.chat = chat
        return self.save(row)
