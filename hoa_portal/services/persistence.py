# hoa_portal/services/persistence.py
"""
Persistence gateway for the transition workflows.

Reads are always scoped by tenant. Writes are conditional on the source
status the transition was validated against, so of two concurrent decisions
on the same record only the first commits; the second gets StaleState with
the status it lost to.
"""

from typing import Iterable, Optional, Sequence
from sqlalchemy import update
from sqlalchemy.orm import Session
from hoa_portal.exceptions import NotFound, StaleState
from hoa_portal.utils.logger import get_logger

logger = get_logger(__name__)


class PersistenceGateway:
    def __init__(self, db: Session):
        self.db = db

    def fetch_scoped(self, model, record_id: str, tenant_id: str, label: Optional[str] = None):
        row = (
            self.db.query(model)
            .filter(model.id == record_id, model.tenant_id == tenant_id)
            .first()
        )
        if row is None:
            raise NotFound(f"{label or model.__name__} not found or access denied")
        return row

    def conditional_update(
        self,
        model,
        record_id: str,
        tenant_id: str,
        expected_statuses: Sequence[str],
        values: dict,
        extra_conditions: Iterable = (),
        label: Optional[str] = None,
    ):
        """UPDATE ... WHERE id, tenant_id AND status IN expected_statuses. Commits on success."""
        stmt = (
            update(model)
            .where(
                model.id == record_id,
                model.tenant_id == tenant_id,
                model.status.in_(list(expected_statuses)),
                *extra_conditions,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
        except Exception:
            self.db.rollback()
            raise

        if result.rowcount == 0:
            self.db.rollback()
            current = self.fetch_scoped(model, record_id, tenant_id, label)
            logger.warning(
                f"[PERSIST] Stale write on {model.__tablename__}:{record_id} "
                f"expected={list(expected_statuses)} current={current.status}"
            )
            raise StaleState(
                f"{label or model.__name__} was modified concurrently; current status: {current.status}",
                current_status=current.status,
            )

        self.db.commit()
        return self.fetch_scoped(model, record_id, tenant_id, label)
