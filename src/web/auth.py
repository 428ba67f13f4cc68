"""JWT bearer auth for FastAPI. The token's ``sub`` claim is the habit user id."""

import os

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

ALGORITHM = "HS256"
SECRET_ENV_VARS = ("STUDYFLOW_JWT_SECRET", "NEXTAUTH_SECRET")

security = HTTPBearer()


def _jwt_secret() -> str:
    for name in SECRET_ENV_VARS:
        secret = os.getenv(name)
        if secret:
            return secret
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="JWT secret not configured",
    )


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_token(token: str) -> dict:
    """Claims -> user dict. Raises 401 for bad signature, expiry, or missing ``sub``."""
    try:
        claims = jwt.decode(token, _jwt_secret(), algorithms=[ALGORITHM])
    except JWTError:
        raise _unauthorized("Invalid or expired token")

    user_id = claims.get("sub")
    if not user_id or not isinstance(user_id, str):
        raise _unauthorized("Invalid token: missing sub")
    return {"id": user_id, "email": claims.get("email"), "name": claims.get("name")}


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    return decode_token(credentials.credentials)
