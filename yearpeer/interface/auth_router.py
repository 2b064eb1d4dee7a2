"""Session endpoints for the signed-in user."""

import logging
import secrets

from fastapi import APIRouter, Depends, Header, Response

from yearpeer.core.config import settings
from yearpeer.core.errors import UnauthorizedError
from yearpeer.domain.create_models import ExternalIdentity
from yearpeer.domain.user import User
from yearpeer.interface.session import clear_session, current_user_id, issue_session
from yearpeer.services import user_service


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def verify_callback_secret(x_auth_callback_secret: str | None = Header(default=None)) -> None:
    """Only the identity proxy holding the shared secret may post sign-in claims.

    Raises:
        UnauthorizedError: If no secret is configured or the header does not match
    """
    expected_secret = settings.auth_callback_secret
    if not expected_secret or not x_auth_callback_secret:
        logger.warning("auth_callback_rejected", extra={"reason": "missing_secret"})
        raise UnauthorizedError("Invalid sign-in callback credentials")

    if not secrets.compare_digest(x_auth_callback_secret, expected_secret):
        logger.warning("auth_callback_rejected", extra={"reason": "secret_mismatch"})
        raise UnauthorizedError("Invalid sign-in callback credentials")


@router.post("/callback", response_model=User, dependencies=[Depends(verify_callback_secret)])
async def sign_in_callback(identity: ExternalIdentity, response: Response) -> User:
    """Record verified identity claims and start a session for the user."""
    user = await user_service.sign_in_external_user(identity=identity)
    issue_session(response, user.id)
    return user


@router.get("/me", response_model=User)
async def get_me(user_id: str = Depends(current_user_id)) -> User:
    """Return the profile of the signed-in user."""
    return await user_service.get_user(user_id=user_id)


@router.post("/logout")
async def logout(response: Response, user_id: str = Depends(current_user_id)) -> dict[str, bool]:
    """Clear the session cookie."""
    clear_session(response)
    logger.info("User signed out", extra={"user_id": user_id})
    return {"success": True}
