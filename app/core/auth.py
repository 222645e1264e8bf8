# app/core/auth.py
import uuid
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from app.core.config import get_settings
from app.core.errors import Failure, Result, Success, raise_for_failure
from app.database import get_session
from app.models.user import User
from app.repositories.user_repo import UserRepository

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so browsing and the cart keep working for guests.
bearer_scheme = HTTPBearer(auto_error=False)

user_repo = UserRepository()

NAME_MAX_LENGTH = 50


def decode_access_token(token: str) -> Result[dict[str, Any]]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Returns Failure.auth if the token is invalid or expired.
    """
    try:
        return Success(
            jwt.decode(
                token,
                settings.SUPABASE_JWT_SECRET,
                algorithms=[settings.SUPABASE_JWT_ALG],
                options={"verify_aud": False},
            )
        )
    except JWTError:
        return Failure.auth("Invalid or expired token")


def token_identity(payload: dict[str, Any]) -> Result[tuple[uuid.UUID, str]]:
    """
    Extract (auth user id, email) from verified claims.
    """
    sub = payload.get("sub")
    email = payload.get("email")
    if not sub or not email:
        return Failure.auth("Token missing sub/email")

    try:
        return Success((uuid.UUID(str(sub)), email))
    except ValueError:
        return Failure.auth("Invalid sub in token")


def _display_name(payload: dict[str, Any], email: str) -> str:
    """
    Name for a freshly provisioned profile: the sign-up name from
    user_metadata if present, else the local part of the email.
    Truncated to the profile's 50 characters.
    """
    metadata = payload.get("user_metadata") or {}
    name = (metadata.get("name") or "").strip()
    if not name:
        name = email.split("@", 1)[0]
    return name[:NAME_MAX_LENGTH]


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Resolve the current user from a Supabase JWT.

    Flow:
      1. If no Authorization header => guest => return None.
      2. Decode JWT => extract 'sub' (auth user id) and 'email'.
      3. Find user profile in the users table.
      4. If missing, auto-provision minimal profile (role="user").

    Raises:
        HTTPException(401): if token is malformed or missing required claims.
    """
    if credentials is None:
        return None  # guest mode

    payload = raise_for_failure(decode_access_token(credentials.credentials))
    user_id, email = raise_for_failure(token_identity(payload))

    user = user_repo.get_by_id(session, user_id)

    # Admins must be promoted manually.
    if user is None:
        user = user_repo.create(
            session,
            User(
                id=user_id,
                email=email,
                name=_display_name(payload, email),
                role="user",
            ),
        )

    return user


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """
    Enforce authentication ("signin required").

    Raises:
        HTTPException(401): if user is None.
    """
    if user is None:
        raise_for_failure(Failure.auth("Signin required"))
    return user


def require_admin(user: User = Depends(require_auth)) -> User:
    """
    Enforce admin role.

    Raises:
        HTTPException(403): if role is not admin.
    """
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user
