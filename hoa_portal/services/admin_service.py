# hoa_portal/services/admin_service.py
"""
Admin account provisioning and password resets.

Creating an admin touches two stores: the identity account (committed on
its own) and the tenant-scoped admin_users row. If the second write fails
the identity account is deleted again, so no login without an admin record
survives. Temporary passwords leave this service only through the
notification outbox.
"""

from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hoa_portal.config import Settings
from hoa_portal.exceptions import DuplicateEmail, Forbidden, HOAPortalError, NotFound, ValidationError
from hoa_portal.models.admin_user import ADMIN_ROLES, AdminUser
from hoa_portal.models.community import Community
from hoa_portal.schemas.admin_user import AdminCreateRequest, PasswordResetRequest
from hoa_portal.services import identity_service
from hoa_portal.services.audit_service import record_audit
from hoa_portal.services.auth_guard import ADMIN_HEAD, AuthorizationGuard, CallerContext
from hoa_portal.services.notification_service import (
    TEMPLATE_ADMIN_PASSWORD_RESET,
    TEMPLATE_ADMIN_WELCOME,
    queue_email,
)
from hoa_portal.utils.logger import get_logger
from hoa_portal.utils.security import generate_temporary_password

logger = get_logger(__name__)


@dataclass
class ProvisionedAdmin:
    admin: AdminUser
    email: str
    tenant_name: str


def check_provisioning_rights(caller: CallerContext, tenant_id: str, role: str):
    if role not in ADMIN_ROLES:
        raise ValidationError("Invalid role. Must be admin_head or admin_officer")
    if caller.role == ADMIN_HEAD and role == ADMIN_HEAD:
        raise Forbidden("Forbidden: Admin heads can only create admin officers, not other admin heads")
    AuthorizationGuard.ensure_tenant(caller, tenant_id)


def create_admin(db: Session, caller: CallerContext, body: AdminCreateRequest, settings: Settings) -> ProvisionedAdmin:
    check_provisioning_rights(caller, body.tenant_id, body.role)

    community = db.query(Community).filter(Community.id == body.tenant_id).first()
    if community is None:
        raise NotFound(f"Community not found: {body.tenant_id}")

    email = identity_service.normalize_email(body.email)
    if identity_service.find_by_email(db, email) is not None:
        raise DuplicateEmail(email)

    temp_password = generate_temporary_password(settings.TEMP_PASSWORD_LENGTH)
    account = identity_service.create_account(
        db,
        email,
        temp_password,
        app_metadata={"role": body.role, "tenant_id": community.id},
        user_metadata={"first_name": body.first_name, "last_name": body.last_name, "phone": body.phone},
        rounds=settings.BCRYPT_ROUNDS,
    )
    account_id = account.id

    try:
        admin = AdminUser(
            id=account_id,
            tenant_id=community.id,
            role=body.role,
            status="active",
            first_name=body.first_name,
            last_name=body.last_name,
            phone=body.phone,
        )
        db.add(admin)
        queue_email(
            db,
            email,
            TEMPLATE_ADMIN_WELCOME,
            {
                "first_name": body.first_name,
                "community_name": community.name,
                "temporary_password": temp_password,
            },
        )
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"[ADMIN] Admin record insert failed for account {account_id}: {e}")
        _rollback_identity(db, account_id)
        if isinstance(e, SQLAlchemyError):
            raise HOAPortalError(f"Failed to create admin record: {e.__class__.__name__}") from e
        raise

    logger.info(f"[ADMIN] Created {body.role} {account_id} for community {community.id} by {caller.caller_id}")
    record_audit(
        db,
        actor_id=caller.caller_id,
        action="create_admin",
        resource_type="admin_user",
        resource_id=account_id,
        after_state={"tenant_id": community.id, "email": email, "role": body.role},
        tenant_id=community.id,
    )
    return ProvisionedAdmin(admin=admin, email=email, tenant_name=community.name)


def _rollback_identity(db: Session, account_id: str):
    """Compensating delete. A failure here leaves an orphaned login and needs manual cleanup."""
    try:
        identity_service.delete_account(db, account_id)
    except Exception as e:
        db.rollback()
        logger.critical(
            f"[ADMIN] Compensating delete of identity account {account_id} failed; "
            f"orphaned account requires manual reconciliation: {e}",
            exc_info=True,
        )


def reset_admin_password(db: Session, caller: CallerContext, body: PasswordResetRequest, settings: Settings):
    admin = db.query(AdminUser).filter(AdminUser.id == body.user_id).first()
    if admin is None:
        raise NotFound("Admin user not found")
    AuthorizationGuard.ensure_tenant(caller, admin.tenant_id)

    account = identity_service.find_account(db, admin.id)
    if account is None:
        raise NotFound("Admin user not found")
    if account.email != identity_service.normalize_email(body.email):
        raise ValidationError("Email does not match the admin account")

    temp_password = generate_temporary_password(settings.TEMP_PASSWORD_LENGTH)
    identity_service.set_password(db, account, temp_password, rounds=settings.BCRYPT_ROUNDS)
    queue_email(
        db,
        account.email,
        TEMPLATE_ADMIN_PASSWORD_RESET,
        {"first_name": admin.first_name, "temporary_password": temp_password},
    )
    db.commit()
    logger.info(f"[ADMIN] Password reset for {admin.id} by {caller.caller_id}")

    record_audit(
        db,
        actor_id=caller.caller_id,
        action="reset_admin_password",
        resource_type="admin_user",
        resource_id=admin.id,
        tenant_id=admin.tenant_id,
    )
    return admin, account.email
