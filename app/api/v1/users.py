from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, require_admin
from app.db.session import get_db
from app.models.user import User
from app.schemas.user import AdminUserUpdate, PasswordChange, UserResponse, UserUpdate
from app.services.user_service import UserService
from app.utils.response import success

router = APIRouter()


@router.put("/profile", response_model=dict)
def update_profile(
    user_update: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update the current user's profile"""
    user = UserService.update_profile(db, current_user, user_update)
    return success(data=UserResponse.model_validate(user), message="User profile updated")


@router.put("/password", response_model=dict)
def change_password(
    passwords: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    UserService.change_password(db, current_user, passwords.current_password, passwords.new_password)
    return success(message="Password updated successfully")


# ============= ADMIN =============

@router.get("/", response_model=dict)
def list_users(
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    users = [UserResponse.model_validate(user) for user in UserService.list_users(db)]
    return success(data=users, message="Users retrieved", meta={"count": len(users)})


@router.get("/{user_id}", response_model=dict)
def get_user(
    user_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = UserService.get_user(db, user_id)
    return success(data=UserResponse.model_validate(user), message="User retrieved")


@router.put("/{user_id}", response_model=dict)
def update_user(
    user_id: int,
    user_update: AdminUserUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = UserService.admin_update_user(db, user_id, user_update)
    return success(data=UserResponse.model_validate(user), message="User updated")


@router.delete("/{user_id}", response_model=dict)
def delete_user(
    user_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Delete a user account along with its todos"""
    UserService.delete_user(db, user_id)
    return success(message="User deleted successfully")
