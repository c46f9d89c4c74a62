"""
Storefront sessions: the per-visitor state the browser used to keep in its
store context and local storage (token, user, cart, chat transcript).
"""

from collections import OrderedDict
from typing import Optional
import logging
import secrets
import threading

from sqlalchemy.orm import Session

from app.config import settings

from domain.schemas.auth_schemas import SessionInfo, StorefrontUser
from domain.schemas.order_schemas import Order
from repositories import SessionRepository
from services.cart_service import CartStore
from services.chat_service import ChatSession

logger = logging.getLogger("storefront.sessions")


class StorefrontState:
    def __init__(
        self,
        session_id: str,
        token: Optional[str] = None,
        user: Optional[StorefrontUser] = None,
        cart_data: Optional[dict] = None,
        chat_data: Optional[list] = None,
    ):
        self.session_id = session_id
        self.token = token
        self.user = user
        self.cart = CartStore(
            token_getter=lambda: self.token,
            lines=CartStore.lines_from_dict(cart_data),
        )
        self.chat = ChatSession(messages=ChatSession.messages_from_list(chat_data))
        # orders last shown on the admin dashboard
        self.admin_orders: list[Order] = []

    @property
    def logged_in(self) -> bool:
        return bool(self.token)

    @property
    def is_admin(self) -> bool:
        return self.logged_in and self.user is not None and self.user.is_admin

    def info(self) -> SessionInfo:
        return SessionInfo(
            session_id=self.session_id,
            logged_in=self.logged_in,
            user=self.user,
            is_admin=self.is_admin,
        )


# least recently used first; evicted sessions are restored from the database
_active: "OrderedDict[str, StorefrontState]" = OrderedDict()
_active_lock = threading.Lock()


class SessionService:
    @staticmethod
    def new_session_id() -> str:
        return secrets.token_urlsafe(24)

    @staticmethod
    def get_or_create(db: Session, session_id: Optional[str]) -> StorefrontState:
        """
        Resolve the visitor's state: from memory, then from the database,
        else a fresh anonymous session.
        """
        with _active_lock:
            if session_id and session_id in _active:
                _active.move_to_end(session_id)
                return _active[session_id]

        state = None
        if session_id:
            row = SessionRepository(db).get_by_id(session_id)
            if row is not None:
                user = StorefrontUser.model_validate(row.user) if row.user else None
                state = StorefrontState(
                    session_id=row.session_id,
                    token=row.token,
                    user=user,
                    cart_data=row.cart,
                    chat_data=row.chat,
                )
                logger.info("Restored storefront session %s", session_id[:8])

        if state is None:
            state = StorefrontState(session_id=SessionService.new_session_id())
            logger.info("Created storefront session %s", state.session_id[:8])

        with _active_lock:
            state = _active.setdefault(state.session_id, state)
            _active.move_to_end(state.session_id)
            while len(_active) > settings.session_cache_size:
                evicted, _ = _active.popitem(last=False)
                logger.debug("Evicted storefront session %s from memory", evicted[:8])
            return state

    @staticmethod
    def save(db: Session, state: StorefrontState) -> None:
        SessionRepository(db).upsert(
            state.session_id,
            token=state.token,
            user=state.user.model_dump(mode="json") if state.user else None,
            cart=state.cart.to_dict(),
            chat=state.chat.to_list(),
        )

    @staticmethod
    def forget_all() -> None:
        """Drop in-memory sessions (persisted rows stay)."""
        with _active_lock:
            _active.clear()

    @staticmethod
    def active_count() -> int:
        with _active_lock:
            return len(_active)
