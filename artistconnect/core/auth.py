# artistconnect/core/auth.py
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel

from artistconnect.core.commerce_client import CommerceApiError, CommerceClient
from artistconnect.core.config import get_settings
from artistconnect.core.supabase_client import supabase_for_token, supabase_public

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so guests can browse and fill a cart.
bearer_scheme = HTTPBearer(auto_error=False)


class Caller(BaseModel):
    """
    The signed-in identity behind a request.

    Identity is owned by Supabase Auth; nothing about the caller is stored
    by the storefront. The raw token is kept so remote calls run as the
    caller.
    """

    id: str
    email: str | None = None
    access_token: str


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def get_current_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Caller | None:
    """
    Resolve the caller from a Supabase JWT.

    Returns:
        Caller for a valid token, None for guests (no Authorization header).

    Raises:
        HTTPException(401): if the token is invalid or has no 'sub'.
    """
    if credentials is None:
        return None  # guest mode

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub",
        )

    return Caller(
        id=str(sub),
        email=payload.get("email"),
        access_token=credentials.credentials,
    )


def require_auth(caller: Caller | None = Depends(get_current_caller)) -> Caller:
    """
    Enforce authentication.

    Checkout, donations and payment status need a signed-in caller.

    Raises:
        HTTPException(401): if caller is None.
    """
    if caller is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please log in to checkout",
        )
    return caller


def get_commerce_client(
    caller: Caller | None = Depends(get_current_caller),
) -> CommerceClient:
    """
    Remote Commerce API client acting as the caller (or as a guest).
    """
    if caller is None:
        return CommerceClient(supabase_public())
    return CommerceClient(supabase_for_token(caller.access_token))


def require_admin(
    caller: Caller = Depends(require_auth),
    commerce: CommerceClient = Depends(get_commerce_client),
) -> Caller:
    """
    Enforce the platform admin role.

    The role lives in the backend, so this asks `is_caller_admin`.

    Raises:
        HTTPException(403): if the caller is not an admin.
        HTTPException(502): if the backend could not be asked.
    """
    try:
        is_admin = commerce.is_caller_admin()
    except CommerceApiError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=e.message or "Unable to verify admin access",
        )
    if not is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return caller
