"""Reviewer authentication dependency for FastAPI."""
import hmac
import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api import config

logger = logging.getLogger(__name__)

# HTTP Bearer scheme for the reviewer API key
security = HTTPBearer(auto_error=False)

_warned_open_access = False


async def require_reviewer(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> None:
    """Allow the request only for holders of the reviewer API key.

    Raises:
        HTTPException: 401 if no key is sent, 403 if the key is wrong.
    """
    global _warned_open_access

    expected = config.REVIEWER_API_KEY
    if expected is None:
        if not _warned_open_access:
            logger.warning("REVIEWER_API_KEY is not set; reviewer endpoints are open")
            _warned_open_access = True
        return

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not hmac.compare_digest(credentials.credentials, expected):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid reviewer key",
        )
