"""Login, signup and session routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_db, get_state
from api.responses import success_response
from domain.schemas.auth_schemas import LoginRequest, SignupRequest
from services.auth_service import AuthService
from services.session_service import StorefrontState

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger("storefront.api.auth")


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest):
    """Create a customer or owner account. The visitor still has to log in afterwards."""
    message = AuthService.signup(payload)
    return success_response({"mode": "login"}, message)


@router.post("/login")
def login(
    payload: LoginRequest,
    state: StorefrontState = Depends(get_state),
    db: Session = Depends(get_db),
):
    """Log in; the guest cart is merged into the account's cart."""
    AuthService.login(db, state, payload)
    return success_response(state.info(), "Login successful!")


@router.post("/logout")
def logout(state: StorefrontState = Depends(get_state), db: Session = Depends(get_db)):
    AuthService.logout(db, state)
    return success_response(state.info(), "Logged out")


@router.get("/me")
def me(state: StorefrontState = Depends(get_state)):
    return success_response(state.info())


@router.get("/google")
def google_login():
    """URL to send the browser to for Google sign-in."""
    return success_response({"url": AuthService.google_login_url()})
