"""
Bearer token handling.

Accounts live in the hosted auth backend; its access tokens are HS256 JWTs
whose `sub` claim is the account id. This service only verifies them.
`create_access_token` exists for tests and local tooling.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from app.core.config import settings


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Mint a token for `user_id` signed with the shared secret."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    )
    return jwt.encode(
        {"sub": str(user_id), "exp": expire},
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )


def get_token_subject(token: str) -> Optional[str]:
    """Account id carried by a valid token, or None if it fails verification."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    subject = payload.get("sub")
    return str(subject) if subject else None
