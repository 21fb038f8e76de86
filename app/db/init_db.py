from sqlalchemy.orm import Session
import logging
from app.core.config import settings
from app.core.security import hash_password
from app.db.base import Base
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)


def init_db(db: Session) -> None:
    """Create tables and seed the bootstrap admin account"""
    Base.metadata.create_all(bind=db.get_bind())

    admin_email = (settings.DEFAULT_ADMIN_EMAIL or "").strip().lower()
    seed_password = (settings.DEFAULT_ADMIN_PASSWORD or "").strip()
    if not admin_email or not seed_password:
        message = (
            "Missing admin bootstrap credentials: set DEFAULT_ADMIN_EMAIL and "
            "DEFAULT_ADMIN_PASSWORD or create an admin user manually before launch."
        )
        if settings.is_production:
            logger.error("%s env=%s", message, settings.ENVIRONMENT)
            raise RuntimeError(message)
        logger.warning("%s env=%s", message, settings.ENVIRONMENT)
        return

    admin = db.query(User).filter(User.email == admin_email).first()
    if not admin:
        admin = User(
            name="Administrator",
            email=admin_email,
            password_hash=hash_password(seed_password),
            role=UserRole.ADMIN,
        )
        db.add(admin)
        db.commit()
        logger.info("admin_user_created email=%s", admin_email)
    elif admin.role != UserRole.ADMIN:
        admin.role = UserRole.ADMIN
        db.commit()
        logger.info("admin_role_granted email=%s", admin_email)

    logger.info("database_initialized")


if __name__ == "__main__":
    from app.db.session import SessionLocal
    logging.basicConfig(level=logging.INFO)
    db = SessionLocal()
    try:
        init_db(db)
    finally:
        db.close()
