"""Shared API dependencies and result translation helpers."""

from typing import Annotated, Any

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from community_engine.db.session import get_db
from community_engine.services import community as engine

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]

# Rejection messages mapped onto HTTP status codes; anything unlisted is a 400.
REJECTION_STATUS: dict[str, int] = {
    engine.COMMUNITY_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    engine.MEMBERSHIP_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    engine.NOT_A_MEMBER: status.HTTP_404_NOT_FOUND,
    engine.NOT_ADMIN: status.HTTP_403_FORBIDDEN,
    engine.NOT_AUTHORIZED_TO_REMOVE: status.HTTP_403_FORBIDDEN,
    engine.DUPLICATE_NAME: status.HTTP_409_CONFLICT,
    engine.ALREADY_MEMBER: status.HTTP_409_CONFLICT,
    engine.LAST_ADMIN: status.HTTP_409_CONFLICT,
    engine.INVALID_ROLE: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def get_community_service(db: SessionDep) -> engine.CommunityService:
    """Build a community engine bound to the request's session."""
    return engine.CommunityService(db)


CommunityServiceDep = Annotated[engine.CommunityService, Depends(get_community_service)]


def raise_for_rejection(result: dict[str, Any]) -> dict[str, Any]:
    """Return ``result`` unchanged unless it carries an engine rejection.

    Raises:
        HTTPException: With the status mapped from the rejection message
    """
    message = result.get("error")
    if message is None:
        return result
    raise HTTPException(
        status_code=REJECTION_STATUS.get(message, status.HTTP_400_BAD_REQUEST),
        detail=message,
    )
