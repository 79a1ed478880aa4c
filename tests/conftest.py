# tests/conftest.py
"""Shared fixtures: in-memory database, seeded tenants/accounts, token factory, API client."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import date
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from hoa_portal.config import Settings
from hoa_portal.database import Database
from hoa_portal.main import create_app
from hoa_portal.models.admin_user import AdminUser
from hoa_portal.models.community import Community
from hoa_portal.models.construction_permit import ConstructionPermit
from hoa_portal.models.vehicle_sticker import VehicleSticker
from hoa_portal.services import identity_service
from hoa_portal.services.auth_guard import CallerContext
from hoa_portal.utils.security import create_access_token


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        JWT_SECRET_KEY="test-jwt-secret-key-for-testing",
        BCRYPT_ROUNDS=4,
        TEMP_PASSWORD_LENGTH=12,
        MAIL_WEBHOOK_URL=None,
        CORS_ORIGINS=["*"],
    )


@pytest.fixture
def database(settings):
    database = Database(settings.DATABASE_URL)
    database.create_tables()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def seed(db, settings):
    """Two communities, a superadmin, an admin_head + officer in A, an admin_head in B."""
    green = Community(name="Green Valley HOA")
    lake = Community(name="Lakeside Estates")
    db.add_all([green, lake])
    db.commit()

    def account(email, role, tenant_id):
        acc = identity_service.create_account(
            db, email, "Initial-Pass1!", {"role": role, "tenant_id": tenant_id}, {}, rounds=settings.BCRYPT_ROUNDS
        )
        if tenant_id:
            db.add(AdminUser(id=acc.id, tenant_id=tenant_id, role=role, first_name=role, last_name="Test"))
            db.commit()
        return acc

    superadmin = account("platform@hoaportal-ops.com", "superadmin", None)
    head_a = account("head@greenvalley-hoa.com", "admin_head", green.id)
    officer_a = account("officer@greenvalley-hoa.com", "admin_officer", green.id)
    head_b = account("head@lakeside-hoa.com", "admin_head", lake.id)

    return SimpleNamespace(
        green=green,
        lake=lake,
        superadmin=superadmin,
        head_a=head_a,
        officer_a=officer_a,
        head_b=head_b,
    )


@pytest.fixture
def caller_for():
    def _caller(account):
        return CallerContext(caller_id=account.id, role=account.role, tenant_id=account.tenant_id)
    return _caller


@pytest.fixture
def make_sticker(db, seed):
    def _make(status="requested", tenant=None, **kwargs):
        sticker = VehicleSticker(
            tenant_id=(tenant or seed.green).id,
            household_id=kwargs.pop("household_id", "hh-0001"),
            vehicle_plate=kwargs.pop("vehicle_plate", "ABC-1234"),
            vehicle_make="Toyota",
            vehicle_model="Vios",
            status=status,
            expiry_date=kwargs.pop("expiry_date", date(2025, 12, 31) if status in ("active", "expiring", "expired") else None),
            **kwargs,
        )
        db.add(sticker)
        db.commit()
        return sticker
    return _make


@pytest.fixture
def make_permit(db, seed):
    def _make(status="pending", tenant=None, **kwargs):
        permit = ConstructionPermit(
            tenant_id=(tenant or seed.green).id,
            household_id=kwargs.pop("household_id", "hh-0001"),
            project_description="Second floor extension",
            status=status,
            **kwargs,
        )
        db.add(permit)
        db.commit()
        return permit
    return _make


@pytest.fixture
def token_for(settings):
    def _token(account, **kwargs):
        return create_access_token(account.id, account.role, settings, tenant_id=account.tenant_id, **kwargs)
    return _token


@pytest.fixture
def auth_header(token_for):
    def _header(account):
        return {"Authorization": f"Bearer {token_for(account)}"}
    return _header


@pytest.fixture
def client(settings, database, seed):
    app = create_app(settings, database)
    with TestClient(app) as c:
        yield c
