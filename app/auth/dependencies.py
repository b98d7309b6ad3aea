# =============================================================================
# app/auth/dependencies.py - Operator Identity
# =============================================================================
# Reads who is calling from an optional Supabase bearer token so actions can
# be written to the operation log. Authentication itself happens upstream;
# this dependency never rejects a request.
#
# Usage:
#   from app.auth import get_operator
#
#   @router.post("/something")
#   async def something(operator: Operator = Depends(get_operator)):
#       ...
# =============================================================================

import logging
from typing import Any, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from app.config import Settings, get_settings
from core.models.logs import Operator

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor (missing header is not an error)
security_optional = HTTPBearer(auto_error=False)


def operator_from_claims(payload: dict[str, Any]) -> Operator:
    """
    Build an Operator from decoded JWT claims.

    Prefers user_metadata.full_name / user_metadata.role, then the email and
    the top-level role claim.
    """
    metadata = payload.get("user_metadata") or {}
    username = metadata.get("full_name") or payload.get("email") or Operator().username
    role = metadata.get("role") or payload.get("role") or Operator().role
    return Operator(username=username, role=role)


def decode_operator(token: str, secret: str | None) -> Operator:
    """
    Decode an HS256 Supabase token into an Operator.

    Returns the anonymous operator when there is no secret or the token
    does not verify.
    """
    if not secret:
        return Operator()

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            audience="authenticated",
        )
    except ExpiredSignatureError:
        logger.warning("JWT token has expired; logging as unknown user")
        return Operator()
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        return Operator()

    return operator_from_claims(payload)


async def get_operator(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional),
    settings: Settings = Depends(get_settings),
) -> Operator:
    """
    Operator for the current request; anonymous when no valid token is sent.
    """
    if credentials is None:
        return Operator()
    return decode_operator(credentials.credentials, settings.SUPABASE_JWT_SECRET)
