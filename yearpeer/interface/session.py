"""Signed session cookies carrying the authenticated user ID."""

import logging

from fastapi import Request, Response
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from yearpeer.core.config import constants, settings
from yearpeer.core.errors import UnauthorizedError


logger = logging.getLogger(__name__)

serializer = URLSafeTimedSerializer(str(settings.secret_key), salt=constants.SESSION_SALT)


def create_session_token(user_id: str) -> str:
    """Sign a session payload for a user."""
    return serializer.dumps({"user_id": user_id})


def issue_session(response: Response, user_id: str) -> None:
    """Set the session cookie on a response after a successful sign-in."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=create_session_token(user_id),
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.session_max_age_seconds,
    )


def clear_session(response: Response) -> None:
    """Remove the session cookie."""
    response.delete_cookie(key=settings.session_cookie_name)


async def current_user_id(request: Request) -> str:
    """Resolve the caller's user ID from the session cookie.

    Raises:
        UnauthorizedError: If the cookie is missing, tampered with, or expired
    """
    session_token = request.cookies.get(settings.session_cookie_name)

    if not session_token:
        logger.warning("session_missing_cookie", extra={"path": request.url.path})
        raise UnauthorizedError("Authentication required")

    try:
        session_data = serializer.loads(session_token, max_age=settings.session_max_age_seconds)
    except (BadSignature, SignatureExpired) as err:
        logger.warning("session_tampered_or_expired", extra={"path": request.url.path})
        raise UnauthorizedError("Authentication required") from err

    user_id = session_data.get("user_id") if isinstance(session_data, dict) else None
    if not user_id:
        logger.warning("session_invalid_payload", extra={"path": request.url.path})
        raise UnauthorizedError("Authentication required")

    return user_id
