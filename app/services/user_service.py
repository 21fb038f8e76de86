from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Optional

import structlog

from app.core.exceptions import (
    EmailInUse,
    IncorrectPassword,
    InvalidCredentials,
    UserAlreadyExists,
    UserNotFound,
)
from app.core.security import hash_password, verify_password
from app.models.user import User, UserRole
from app.schemas.user import AdminUserUpdate, UserCreate, UserUpdate

logger = structlog.get_logger()


class UserService:

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.strip().lower()).first()

    @staticmethod
    def get_user(db: Session, user_id: int) -> User:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise UserNotFound()
        return user

    @staticmethod
    def register(db: Session, user_in: UserCreate, role: UserRole = UserRole.USER) -> User:
        """Create an account. Emails are unique after normalization."""
        if UserService.get_by_email(db, user_in.email):
            raise UserAlreadyExists()

        user = User(
            name=user_in.name,
            email=user_in.email,
            phone=user_in.phone,
            password_hash=hash_password(user_in.password),
            role=role,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise UserAlreadyExists()
        db.refresh(user)

        logger.info("user_registered", user_id=user.id, role=user.role.value)
        return user

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> User:
        user = UserService.get_by_email(db, email)
        if not user or not verify_password(password, user.password_hash):
            logger.info("login_failed", email=email)
            raise InvalidCredentials()

        logger.info("user_logged_in", user_id=user.id)
        return user

    @staticmethod
    def _apply_update(db: Session, user: User, update: UserUpdate) -> None:
        # Check if email is already taken (if email is changed)
        if update.email and update.email != user.email:
            if UserService.get_by_email(db, update.email):
                raise EmailInUse()
            user.email = update.email

        if update.name:
            user.name = update.name
        if update.phone:
            user.phone = update.phone

    @staticmethod
    def update_profile(db: Session, user: User, update: UserUpdate) -> User:
        UserService._apply_update(db, user, update)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise EmailInUse()
        db.refresh(user)
        return user

    @staticmethod
    def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
        if not verify_password(current_password, user.password_hash):
            raise IncorrectPassword()

        user.password_hash = hash_password(new_password)
        db.commit()
        logger.info("password_changed", user_id=user.id)

    @staticmethod
    def list_users(db: Session) -> List[User]:
        return db.query(User).order_by(User.created_at.asc(), User.id.asc()).all()

    @staticmethod
    def admin_update_user(db: Session, user_id: int, update: AdminUserUpdate) -> User:
        user = UserService.get_user(db, user_id)
        UserService._apply_update(db, user, update)
        if update.role:
            user.role = update.role

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise EmailInUse()
        db.refresh(user)
        return user

    @staticmethod
    def delete_user(db: Session, user_id: int) -> None:
        """Remove the account together with its todos and revoked tokens."""
        user = UserService.get_user(db, user_id)
        db.delete(user)
        db.commit()
        logger.info("user_deleted", user_id=user_id)
