import pytest
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import verify_password
from app.db.init_db import init_db
from app.models.user import User, UserRole


def test_init_db_seeds_admin(db_session: Session, monkeypatch):
    monkeypatch.setattr(settings, "DEFAULT_ADMIN_EMAIL", " Root@Example.com ")
    monkeypatch.setattr(settings, "DEFAULT_ADMIN_PASSWORD", "bootstrap-pass")

    init_db(db_session)
    init_db(db_session)

    admins = db_session.query(User).filter(User.email == "root@example.com").all()
    assert len(admins) == 1
    assert admins[0].role == UserRole.ADMIN
    assert verify_password("bootstrap-pass", admins[0].password_hash)


def test_init_db_promotes_existing_account(db_session: Session, create_user, monkeypatch):
    user = create_user("root@example.com")
    monkeypatch.setattr(settings, "DEFAULT_ADMIN_EMAIL", "root@example.com")
    monkeypatch.setattr(settings, "DEFAULT_ADMIN_PASSWORD", "bootstrap-pass")

    init_db(db_session)

    db_session.refresh(user)
    assert user.role == UserRole.ADMIN


def test_init_db_without_credentials(db_session: Session, monkeypatch):
    monkeypatch.setattr(settings, "DEFAULT_ADMIN_EMAIL", "")
    monkeypatch.setattr(settings, "DEFAULT_ADMIN_PASSWORD", "")

    init_db(db_session)
    assert db_session.query(User).count() == 0

    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    with pytest.raises(RuntimeError, match="Missing admin bootstrap credentials"):
        init_db(db_session)
