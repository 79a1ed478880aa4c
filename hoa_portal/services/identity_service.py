# hoa_portal/services/identity_service.py
"""
Identity store adapter: login accounts and their role/tenant metadata.
Every write here commits on its own: the identity store is a separate unit
from the tenant tables, which is why admin provisioning needs a
compensating delete when its second step fails.
"""

from typing import Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from hoa_portal.exceptions import DuplicateEmail
from hoa_portal.models.identity_account import IdentityAccount
from hoa_portal.utils.logger import get_logger
from hoa_portal.utils.security import hash_password

logger = get_logger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_account(db: Session, account_id: str) -> Optional[IdentityAccount]:
    return db.query(IdentityAccount).filter(IdentityAccount.id == account_id).first()


def find_by_email(db: Session, email: str) -> Optional[IdentityAccount]:
    return (
        db.query(IdentityAccount)
        .filter(func.lower(IdentityAccount.email) == normalize_email(email))
        .first()
    )


def create_account(db: Session, email, password, app_metadata, user_metadata, rounds=12) -> IdentityAccount:
    """Create and commit an identity account. Raises DuplicateEmail on a unique-key clash."""
    account = IdentityAccount(
        email=normalize_email(email),
        password_hash=hash_password(password, rounds),
        app_metadata=dict(app_metadata),
        user_metadata=dict(user_metadata),
        is_active=True,
        must_change_password=True,
    )
    db.add(account)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateEmail(email)
    logger.info(f"[IDENTITY] Created account {account.id} role={account.role} tenant={account.tenant_id}")
    return account


def delete_account(db: Session, account_id: str):
    """Physically remove an identity account. Used only as a compensating action."""
    db.query(IdentityAccount).filter(IdentityAccount.id == account_id).delete(synchronize_session=False)
    db.commit()
    logger.warning(f"[IDENTITY] Deleted account {account_id}")


def set_password(db: Session, account: IdentityAccount, password: str, rounds=12, must_change=True):
    """Replace the password hash. Does not commit."""
    account.password_hash = hash_password(password, rounds)
    account.must_change_password = must_change
