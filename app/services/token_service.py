"""Token revocation and request authorization.

``authorize`` and ``check_admin`` never raise for a rejected credential; they
return a :class:`Rejection` describing why, and the HTTP layer decides how to
render it.
"""
import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional, Union

import structlog
from fastapi import status
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import ACCESS_TOKEN_TYPE, decode_token
from app.models.token_denylist import TokenDenylist
from app.models.user import User, UserRole

logger = structlog.get_logger()

BEARER_PREFIX = "Bearer "


class RejectionKind(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    INVALID_TOKEN = "invalid_token"
    TOKEN_EXPIRED = "token_expired"
    TOKEN_REVOKED = "token_revoked"
    USER_NOT_FOUND = "user_not_found"
    FORBIDDEN = "forbidden"

    @property
    def status_code(self) -> int:
        if self is RejectionKind.FORBIDDEN:
            return status.HTTP_403_FORBIDDEN
        return status.HTTP_401_UNAUTHORIZED


REJECTION_MESSAGES = {
    RejectionKind.UNAUTHENTICATED: "Not authorized, no token",
    RejectionKind.INVALID_TOKEN: "Not authorized, invalid token",
    RejectionKind.TOKEN_EXPIRED: "Not authorized, token expired",
    RejectionKind.TOKEN_REVOKED: "Token has been revoked",
    RejectionKind.USER_NOT_FOUND: "Not authorized, user not found",
    RejectionKind.FORBIDDEN: "Not authorized as admin",
}


@dataclass(frozen=True)
class Rejection:
    kind: RejectionKind

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @property
    def message(self) -> str:
        return REJECTION_MESSAGES[self.kind]


@dataclass(frozen=True)
class ResolvedIdentity:
    user_id: int
    email: str
    role: UserRole
    token: str
    user: User = field(compare=False, repr=False)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


AuthResult = Union[ResolvedIdentity, Rejection]


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


def is_token_revoked(db: Session, token: str, now: Optional[datetime] = None) -> bool:
    """Exact-match lookup; entries past their retention window are ignored."""
    now = now or datetime.utcnow()
    return (
        db.query(TokenDenylist.id)
        .filter(
            TokenDenylist.token == token,
            TokenDenylist.expires_at > now,
        )
        .first()
        is not None
    )


def revoke_token(db: Session, token: str, user_id: int, now: Optional[datetime] = None) -> bool:
    """Denylist ``token`` for the retention window.

    Revoking an already revoked token is a no-op. Returns True when a new
    entry was written.
    """
    now = now or datetime.utcnow()
    expires_at = now + timedelta(hours=settings.DENYLIST_RETENTION_HOURS)

    existing = db.query(TokenDenylist).filter(TokenDenylist.token == token).first()
    if existing:
        if existing.expires_at > now:
            return False
        # Lapsed entry the sweeper has not removed yet.
        existing.user_id = user_id
        existing.created_at = now
        existing.expires_at = expires_at
        db.commit()
        logger.info("token_revoked", user_id=user_id, refreshed=True)
        return True

    db.add(
        TokenDenylist(
            token=token,
            user_id=user_id,
            created_at=now,
            expires_at=expires_at,
        )
    )
    try:
        db.commit()
    except IntegrityError:
        # A concurrent revoke of the same token won the insert.
        db.rollback()
        logger.info("token_revoke_duplicate", user_id=user_id)
        return False

    logger.info("token_revoked", user_id=user_id, expires_at=expires_at.isoformat())
    return True


def authorize(db: Session, token: Optional[str], now: Optional[datetime] = None) -> AuthResult:
    """Resolve a raw bearer token to the calling user, or explain the rejection.

    The denylist is consulted before the signature, so a revoked token is
    refused even while it still verifies. An expired token is always reported
    as expired, whether or not it was also revoked.
    """
    if not token:
        return Rejection(RejectionKind.UNAUTHENTICATED)

    revoked = is_token_revoked(db, token, now=now)

    try:
        payload = decode_token(token)
    except ExpiredSignatureError:
        return Rejection(RejectionKind.TOKEN_EXPIRED)
    except JWTError:
        if revoked:
            return Rejection(RejectionKind.TOKEN_REVOKED)
        return Rejection(RejectionKind.INVALID_TOKEN)

    if revoked:
        return Rejection(RejectionKind.TOKEN_REVOKED)

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        return Rejection(RejectionKind.INVALID_TOKEN)

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        return Rejection(RejectionKind.INVALID_TOKEN)

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        return Rejection(RejectionKind.USER_NOT_FOUND)

    return ResolvedIdentity(
        user_id=user.id,
        email=user.email,
        role=user.role,
        token=token,
        user=user,
    )


def check_admin(identity: ResolvedIdentity) -> AuthResult:
    if not identity.is_admin:
        return Rejection(RejectionKind.FORBIDDEN)
    return identity
