"""Admin authentication dependencies.

FastAPI dependency protecting operator endpoints that change runtime
configuration (rate limit rules). Callers present the ADMIN_API_TOKEN as a
bearer token. With no token configured the endpoints are closed.

Usage:
    @router.put("/rules", dependencies=[Depends(require_admin)])
    async def replace_rules(...):
        ...
"""

import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.core.config import Settings, get_settings

# auto_error=False so a missing header gets our own 401 problem body
bearer_scheme_optional = HTTPBearer(auto_error=False)


async def require_admin(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme_optional)
    ],
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    """Allow the request only with the configured admin bearer token.

    Raises:
        HTTPException 403: If no admin token is configured.
        HTTPException 401: If the token is missing or does not match.
    """
    expected = settings.admin_api_token
    if expected is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin API is disabled",
        )

    if credentials is None or not secrets.compare_digest(
        credentials.credentials.encode(), expected.encode()
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing admin token",
            headers={"WWW-Authenticate": "Bearer"},
        )
