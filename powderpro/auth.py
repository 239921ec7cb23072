"""
Accounts: password hashing, JWT access/refresh tokens, and the FastAPI
dependencies that resolve the calling customer or admin.

Tokens only carry the user id. The role is read from the users table on
every request, so promoting a customer (scripts/create_admin.py) takes
effect without a new login.
"""

import hashlib
import uuid
from datetime import datetime, timedelta

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from . import models
from .config import settings
from .database import get_db

ACCESS = "access"
REFRESH = "refresh"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _signing_key() -> str:
    if not settings.JWT_SECRET:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Token signing is not configured (JWT_SECRET)",
        )
    return settings.JWT_SECRET


def _encode(user_id: int, token_type: str, lifetime: timedelta, **claims) -> str:
    payload = {
        "sub": str(user_id),
        "type": token_type,
        "exp": datetime.utcnow() + lifetime,
        **claims,
    }
    return jwt.encode(payload, _signing_key(), algorithm=settings.JWT_ALGORITHM)


def create_access_token(user_id: int) -> str:
    return _encode(user_id, ACCESS, timedelta(minutes=settings.JWT_ACCESS_EXPIRE_MINUTES))


def create_refresh_token(user_id: int) -> str:
    # jti keeps two refresh tokens issued in the same second distinct
    return _encode(
        user_id, REFRESH, timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS), jti=uuid.uuid4().hex,
    )


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def decode_token(token: str, expected_type: str) -> int:
    """Check signature, expiry and token type. Returns the user id."""
    try:
        payload = jwt.decode(token, _signing_key(), algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise _unauthorized("Invalid or expired token")

    if payload.get("type") != expected_type:
        raise _unauthorized(f"Expected a {expected_type} token")
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise _unauthorized("Invalid token payload")


def _load_user(db: Session, user_id: int) -> models.User:
    user = db.query(models.User).filter(models.User.id == user_id).first()
    if not user:
        raise _unauthorized("Account no longer exists")
    return user


def issue_tokens(db: Session, user: models.User) -> dict:
    """New access + refresh pair. Only the refresh token's hash is stored."""
    refresh_token = create_refresh_token(user.id)
    db.add(models.AuthToken(
        user_id=user.id,
        token_hash=hash_token(refresh_token),
        token_type=REFRESH,
        expires_at=datetime.utcnow() + timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS),
    ))
    db.commit()
    return {
        "access_token": create_access_token(user.id),
        "refresh_token": refresh_token,
        "token_type": "bearer",
        "user_id": user.id,
    }


def redeem_refresh_token(db: Session, refresh_token: str) -> models.User:
    """The user behind a refresh token that is valid, stored and unexpired."""
    user_id = decode_token(refresh_token, REFRESH)
    stored = db.query(models.AuthToken).filter(
        models.AuthToken.token_hash == hash_token(refresh_token),
        models.AuthToken.token_type == REFRESH,
    ).first()
    if not stored:
        raise _unauthorized("Refresh token has been revoked")
    if stored.expires_at < datetime.utcnow():
        raise _unauthorized("Refresh token expired")
    return _load_user(db, user_id)


def role_for_email(email: str) -> str:
    if email.strip().lower() in settings.admin_emails:
        return models.UserRole.ADMIN
    return models.UserRole.CUSTOMER


# --- FastAPI dependencies ---

def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer),
    db: Session = Depends(get_db),
) -> models.User:
    if credentials is None:
        raise _unauthorized("Authentication required")
    return _load_user(db, decode_token(credentials.credentials, ACCESS))


def require_admin(current_user: models.User = Depends(get_current_user)) -> models.User:
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only administrators can do this",
        )
    return current_user
