"""Bearer token validation for the ApoloHRA routes."""

import logging
from typing import Any, Dict

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from config import AuthConfig

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is answered with 401, not 403
security = HTTPBearer(auto_error=False)


def decode_token(token: str, auth_config: AuthConfig) -> Dict[str, Any]:
    """
    Decode and verify a bearer token.

    Raises:
        JWTError: if the signature, expiry, audience or issuer does not check out
    """
    options = {"verify_aud": auth_config.audience is not None}
    return jwt.decode(
        token,
        auth_config.secret,
        algorithms=[auth_config.algorithm],
        audience=auth_config.audience,
        issuer=auth_config.issuer,
        options=options,
    )


def require_bearer_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Dict[str, Any]:
    """Dependency attached to every protected route; returns the token claims."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    auth_config: AuthConfig = request.app.state.config.auth
    if not auth_config.secret:
        logger.error("No token secret configured, rejecting request")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return decode_token(credentials.credentials, auth_config)
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )
