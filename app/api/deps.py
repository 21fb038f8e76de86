import structlog
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.exceptions import APIError
from app.db.session import get_db
from app.models.user import User
from app.services.token_service import (
    Rejection,
    ResolvedIdentity,
    authorize,
    check_admin,
    extract_bearer_token,
)

logger = structlog.get_logger()


def _rejection_error(rejection: Rejection) -> APIError:
    headers = {"WWW-Authenticate": "Bearer"} if rejection.status_code == 401 else None
    return APIError(
        status_code=rejection.status_code,
        message=rejection.message,
        errors=[{"type": rejection.kind.value}],
        headers=headers,
    )


def get_current_identity(
    request: Request,
    db: Session = Depends(get_db),
) -> ResolvedIdentity:
    """Authorize the bearer token on the request and attach the caller's identity."""
    token = extract_bearer_token(request.headers.get("Authorization"))
    outcome = authorize(db, token)

    if isinstance(outcome, Rejection):
        logger.info(
            "auth_rejected",
            kind=outcome.kind.value,
            method=request.method,
            path=request.url.path,
        )
        raise _rejection_error(outcome)

    request.state.identity = outcome
    return outcome


def get_current_user(
    identity: ResolvedIdentity = Depends(get_current_identity),
) -> User:
    return identity.user


def require_admin(
    request: Request,
    identity: ResolvedIdentity = Depends(get_current_identity),
) -> User:
    outcome = check_admin(identity)
    action_name = f"{request.method} {request.url.path}"

    if isinstance(outcome, Rejection):
        logger.warning(
            "admin_access_denied",
            action=action_name,
            user_id=identity.user_id,
        )
        raise _rejection_error(outcome)

    logger.info(
        "admin_action",
        action=action_name,
        admin_user_id=identity.user_id,
    )
    return identity.user
