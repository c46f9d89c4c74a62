from sqlalchemy.orm import Session
import logging

from adapters import backend_client
from app.exceptions import BackendError, ServiceValidationError, UnauthorizedError
from domain.schemas.auth_schemas import LoginRequest, SignupRequest, StorefrontUser
from services.session_service import SessionService, StorefrontState

logger = logging.getLogger("storefront.auth")


class AuthService:
    @staticmethod
    def signup(payload: SignupRequest) -> str:
        """
        Register an account with the backend.

        Registration does not log the visitor in; they are asked to log in next.
        """
        try:
            backend_client.get_client().register(
                username=payload.username,
                email=payload.email,
                password=payload.password,
                role=payload.role.value,
            )
        except BackendError as exc:
            if exc.code == backend_client.REJECTED:
                raise ServiceValidationError(exc.message) from exc
            raise
        logger.info("Registered new %s account", payload.role.value)
        return "Registration successful! Please login now."

    @staticmethod
    def login(db: Session, state: StorefrontState, payload: LoginRequest) -> StorefrontUser:
        """
        Log in, then bring the cart in line with the backend.

        A cart filled as a guest is pushed to the backend first so it is not lost.
        """
        try:
            response = backend_client.get_client().login(payload.email, payload.password)
        except BackendError as exc:
            if exc.code == backend_client.REJECTED:
                raise UnauthorizedError(exc.message) from exc
            raise
        token = response.get("token")
        if not token:
            raise UnauthorizedError("Login failed")

        user_data = dict(response.get("user") or {})
        if response.get("userType") and not user_data.get("role"):
            user_data["role"] = response["userType"]
        user = StorefrontUser.model_validate(user_data)

        state.token = token
        state.user = user
        state.admin_orders = []

        if not state.cart.is_empty():
            state.cart.merge_guest_cart()
        else:
            try:
                state.cart.reconcile()
            except BackendError as exc:
                logger.warning("Could not load cart after login: %s", exc)

        SessionService.save(db, state)
        logger.info("Session %s logged in as %s", state.session_id[:8], user.role)
        return user

    @staticmethod
    def logout(db: Session, state: StorefrontState) -> None:
        state.token = None
        state.user = None
        state.admin_orders = []
        state.cart.clear()
        SessionService.save(db, state)

    @staticmethod
    def google_login_url() -> str:
        return backend_client.get_client().google_auth_url()

    @staticmethod
    def require_login(state: StorefrontState, message: str = "Please login first") -> str:
        if not state.token:
            raise UnauthorizedError(message)
        return state.token
