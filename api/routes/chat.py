"""Chat assistant routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_db, get_state
from api.responses import success_response
from domain.schemas.chat_schemas import ChatSendRequest
from services.session_service import SessionService, StorefrontState

router = APIRouter(prefix="/chat", tags=["Chat"])
logger = logging.getLogger("storefront.api.chat")


@router.get("")
def transcript(state: StorefrontState = Depends(get_state)):
    return success_response(state.chat.transcript())


@router.post("/messages")
def send_message(
    payload: ChatSendRequest,
    state: StorefrontState = Depends(get_state),
    db: Session = Depends(get_db),
):
    """
    Send a message to the canteen assistant.

    Blank messages, or messages sent while a reply is pending, leave the
    transcript unchanged.
    """
    state.chat.send(payload.message)
    SessionService.save(db, state)
    return success_response(state.chat.transcript())
