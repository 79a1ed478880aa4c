# hoa_portal/services/auth_guard.py
"""
Authorization guard. Runs before any data access on every privileged endpoint.

Resolves a bearer credential into (caller_id, role, tenant_id) and rejects
callers whose role is not allowed or who target another tenant. Role and
tenant are read from the identity account's app_metadata, which only this
service writes; the token only has to prove which account is calling.

Usage in a router:

    @router.post("/approve-sticker")
    def approve(body, caller: CallerContext = Depends(require_roles(*TENANT_ADMIN_ROLES))):
        ...
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from hoa_portal.config import Settings
from hoa_portal.database import get_db
from hoa_portal.exceptions import Forbidden, Unauthorized
from hoa_portal.services.identity_service import find_account
from hoa_portal.utils.logger import get_logger
from hoa_portal.utils.security import decode_token

logger = get_logger(__name__)

SUPERADMIN = "superadmin"
ADMIN_HEAD = "admin_head"
ADMIN_OFFICER = "admin_officer"
TENANT_ADMIN_ROLES = (ADMIN_HEAD, ADMIN_OFFICER)


@dataclass(frozen=True)
class CallerContext:
    caller_id: str
    role: str
    tenant_id: Optional[str]

    @property
    def is_superadmin(self) -> bool:
        return self.role == SUPERADMIN


class AuthorizationGuard:
    def __init__(self, settings: Settings):
        self.settings = settings

    def resolve(self, authorization: Optional[str], db: Session) -> CallerContext:
        """Bearer header -> CallerContext. Pure lookup, no writes."""
        if not authorization:
            raise Unauthorized("Unauthorized: Missing authorization header")
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise Unauthorized("Unauthorized: Malformed authorization header")

        claims = decode_token(token.strip(), self.settings)
        subject = claims.get("sub")
        if not subject:
            raise Unauthorized("Unauthorized: Token has no subject")

        account = find_account(db, subject)
        if account is None or not account.is_active:
            raise Unauthorized("Unauthorized: Unknown or disabled account")

        return CallerContext(caller_id=account.id, role=account.role, tenant_id=account.tenant_id)

    def authorize(self, caller: CallerContext, allowed_roles: Iterable[str]):
        allowed_roles = tuple(allowed_roles)
        if caller.role not in allowed_roles:
            logger.warning(f"[AUTH] Caller {caller.caller_id} role={caller.role} not in {allowed_roles}")
            raise Forbidden(f"Forbidden: Role {caller.role or 'none'} is not allowed to perform this action")
        if not caller.is_superadmin and not caller.tenant_id:
            raise Forbidden("Forbidden: Caller has no tenant")

    @staticmethod
    def ensure_tenant(caller: CallerContext, tenant_id: str):
        """Superadmins act across tenants; everyone else only within their own."""
        if caller.is_superadmin:
            return
        if tenant_id != caller.tenant_id:
            logger.warning(f"[AUTH] Caller {caller.caller_id} tenant={caller.tenant_id} targeted tenant={tenant_id}")
            raise Forbidden("Forbidden: Cannot act on another community")


def require_roles(*roles: str):
    """FastAPI dependency factory: resolve the caller and enforce the role set."""

    def dependency(request: Request, db: Session = Depends(get_db)) -> CallerContext:
        guard: AuthorizationGuard = request.app.state.guard
        caller = guard.resolve(request.headers.get("Authorization"), db)
        guard.authorize(caller, roles)
        return caller

    return dependency
