"""User identity checks."""

from uuid import UUID

from workday_tracker.domain.errors import NotAuthenticatedError


def require_user(user_id: UUID | None) -> UUID:
    """Return the user id or raise when there is no user context."""
    if user_id is None:
        raise NotAuthenticatedError("No authenticated user")
    return user_id
