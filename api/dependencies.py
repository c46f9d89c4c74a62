"""
API dependencies for dependency injection
"""

from typing import Generator
from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from app.config import settings
from domain.models import get_db_session
from services.session_service import SessionService, StorefrontState


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db session here
            pass
    """
    yield from get_db_session()


def get_state(
    request: Request, response: Response, db: Session = Depends(get_db)
) -> StorefrontState:
    """
    Storefront session of the caller, identified by the session header.

    Unknown or missing ids get a fresh session; the id to use from now on is
    returned in the same header.
    """
    state = SessionService.get_or_create(db, request.headers.get(settings.session_header))
    response.headers[settings.session_header] = state.session_id
    return state
