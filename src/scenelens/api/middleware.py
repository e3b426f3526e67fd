"""Service API key check applied to every SceneLens route."""

from __future__ import annotations

import logging
import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from scenelens.api.deps import get_settings

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False, description="SCENELENS_API_KEY, when configured")


def _key_matches(presented: str, expected: str) -> bool:
    return secrets.compare_digest(presented.encode(), expected.encode())


async def verify_api_key(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
) -> None:
    """Reject requests whose bearer token differs from SCENELENS_API_KEY.

    With no key configured the service is open. The provider credentials
    play no part here.
    """
    expected = get_settings(request).api_key
    if expected is None:
        return
    if credentials is not None and _key_matches(credentials.credentials, expected):
        return

    client = request.client.host if request.client else "unknown"
    reason = "missing" if credentials is None else "invalid"
    logger.warning("Rejected %s %s from %s: %s API key", request.method, request.url.path, client, reason)
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or missing API key",
        headers={"WWW-Authenticate": "Bearer"},
    )
