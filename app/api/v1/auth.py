from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_identity, get_current_user
from app.core.config import settings
from app.core.rate_limiter import limiter
from app.core.security import create_access_token
from app.db.session import get_db
from app.models.user import User
from app.schemas.user import UserCreate, UserLogin, UserResponse
from app.services.token_service import ResolvedIdentity, revoke_token
from app.services.user_service import UserService
from app.utils.response import success

router = APIRouter()


def _token_payload(user: User) -> dict:
    return {
        "token": create_access_token(user.id),
        "user": UserResponse.model_validate(user),
    }


@router.post(
    "/register",
    response_model=dict,
    status_code=status.HTTP_201_CREATED,
    summary="Register user account",
    description="""
Creates a new user account and returns an access token.

Validation:
1. Email must be unique (compared lower-cased)
2. Password is hashed before persistence
""",
    responses={
        201: {"description": "Registration successful"},
        400: {"description": "Email already registered"},
        422: {"description": "Validation error"},
    },
)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def register(request: Request, user_in: UserCreate, db: Session = Depends(get_db)):
    user = UserService.register(db, user_in)
    return success(data=_token_payload(user), message="Registration successful")


@router.post(
    "/login",
    response_model=dict,
    summary="Login user",
    responses={
        200: {"description": "Login successful"},
        401: {"description": "Invalid credentials"},
    },
)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def login(request: Request, credentials: UserLogin, db: Session = Depends(get_db)):
    user = UserService.authenticate(db, credentials.email, credentials.password)
    return success(data=_token_payload(user), message="Login successful")


@router.get("/me", response_model=dict)
def get_me(current_user: User = Depends(get_current_user)):
    """Get current user profile"""
    return success(data=UserResponse.model_validate(current_user), message="User profile retrieved")


@router.post("/logout", response_model=dict)
def logout(
    identity: ResolvedIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Revoke the bearer token used for this request."""
    revoke_token(db, identity.token, identity.user_id)
    return success(message="Successfully logged out")
