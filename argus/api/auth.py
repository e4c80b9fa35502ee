"""Bearer-token guard for the Argus API.

The expected token comes from the ``APIConfig`` the app was created with
(``ARGUS_API_TOKEN`` by default). An empty token disables the check, which is
the development setup.
"""

from __future__ import annotations

import secrets

from fastapi import Depends, Header, HTTPException, Request

from argus.config.settings import APIConfig


def _configured_token(request: Request) -> str:
    config: APIConfig | None = getattr(request.app.state, "api_config", None)
    if config is None:
        return ""
    return config.api_token.strip()


def _get_bearer_token(authorization: str = Header(default="")) -> str:
    """Extract the credentials of a ``Bearer`` Authorization header."""
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return credentials.strip()


async def require_api_auth(
    request: Request, token: str = Depends(_get_bearer_token)
) -> str:
    expected = _configured_token(request)
    if not expected:
        return ""
    if not token or not secrets.compare_digest(token.encode(), expected.encode()):
        raise HTTPException(
            status_code=401,
            detail="Invalid or missing API token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token
