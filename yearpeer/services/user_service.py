"""User service for external sign-in and profile lookup."""

import logging

from yearpeer.core import db_client
from yearpeer.core.db_client import RecordNotFoundError, sanitize_param
from yearpeer.core.errors import DomainValidationError, NotFoundError
from yearpeer.core.logging import log_with_user_context, span
from yearpeer.domain.create_models import ExternalIdentity
from yearpeer.domain.update_models import UserProfileUpdate
from yearpeer.domain.user import User


logger = logging.getLogger(__name__)


def _profile_from_identity(identity: ExternalIdentity) -> UserProfileUpdate:
    return UserProfileUpdate(
        first_name=identity.given_name or "",
        last_name=identity.family_name or "",
        picture_url=identity.picture,
        external_id=identity.subject,
    )


async def sign_in_external_user(*, identity: ExternalIdentity) -> User:
    """Find or create the user behind an external identity.

    Users are matched by email. The profile fields (names, picture and
    provider subject) are refreshed on every sign-in.

    Args:
        identity: Claims from the identity provider

    Returns:
        The created or refreshed user

    Raises:
        DomainValidationError: If the identity carries no email
        db_client.DatabaseError: If database operation fails
    """
    with span("user_service.sign_in_external_user"):
        # Guard: the email is the only stable key we match on
        if not identity.email:
            logger.warning("Rejected external sign-in without email")
            raise DomainValidationError("Email claim not found")

        profile = _profile_from_identity(identity).model_dump()

        existing = await db_client.get_first_record(
            collection="users",
            filter_query=f'email = "{sanitize_param(identity.email)}"',
        )

        if existing is None:
            record = await db_client.create_record(collection="users", data={"email": identity.email, **profile})
            log_with_user_context(logger, "info", "Created user from external sign-in", user_id=record["id"])
        else:
            record = await db_client.update_record(collection="users", record_id=existing["id"], data=profile)
            log_with_user_context(logger, "info", "Refreshed user profile", user_id=record["id"])

        return User.model_validate(record)


async def get_user(*, user_id: str) -> User:
    """Get a user by ID.

    Raises:
        NotFoundError: If the user does not exist
    """
    with span("user_service.get_user"):
        try:
            record = await db_client.get_record(collection="users", record_id=user_id)
        except RecordNotFoundError as e:
            raise NotFoundError(f"User with ID {user_id} not found") from e
        return User.model_validate(record)
