"""Bearer-token guard for every feedpush router.

The expected token comes from `feedpush.config.api_token()`. With no token
configured the API runs open, which is how local development and the tests
use it.
"""

import hmac
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from feedpush.config import api_token

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def verify_token(credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme)) -> None:
    expected = api_token()
    if expected is None:
        return
    if credentials is None:
        raise _unauthorized("Not authenticated")
    if not hmac.compare_digest(credentials.credentials.encode(), expected.encode()):
        logger.warning("Rejected API request with an invalid bearer token")
        raise _unauthorized("Invalid token")
