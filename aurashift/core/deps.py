import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from aurashift.core.errors import AuthenticationMissingError, InvalidTokenError
from aurashift.core.security import decode_access_token
from aurashift.db.base import get_db
from aurashift.models.user import User

logger = logging.getLogger(__name__)


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("authorization")
    if not auth_header:
        return None
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user_id(
    request: Request,
    db: Session = Depends(get_db),
) -> int:
    """Resolve the caller's user id from the Bearer token; the user must still exist."""
    token = _bearer_token(request)
    if not token:
        raise AuthenticationMissingError()

    payload = decode_access_token(token)
    if not payload:
        logger.info("Rejected token on %s: undecodable", request.url.path)
        raise InvalidTokenError()

    try:
        user_id = int(payload.get("userId"))
    except (TypeError, ValueError):
        raise InvalidTokenError("Invalid token payload")

    if db.get(User, user_id) is None:
        raise InvalidTokenError("User not found")
    return user_id
