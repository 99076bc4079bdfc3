from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError

from aurashift.core.config import settings

# ======================
# JWT
# ======================
# Tokens are issued by the account service; `create_access_token` exists for
# operator scripts and tests.


def create_access_token(user_id: int, email: str | None = None, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"userId": str(user_id), "exp": expire}
    if email:
        to_encode["email"] = email
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
