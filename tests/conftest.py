import os
import sys
import tempfile

# Point the app at a throwaway database before anything imports database.py
_db_dir = tempfile.mkdtemp(prefix="gym_test_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test_gym.db')}"
os.environ["ALLOW_DEV_IDENTITY"] = "true"
os.environ.pop("STRIPE_SECRET_KEY", None)

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from fastapi.testclient import TestClient

from auth import create_identity_token
from database import Base, engine, init_db
from main import app
from models import Credentials, ManualCreateMemberRequest, MembershipPlan, UserRole
from models_orm import UserRoleORM
from database import get_db_session
from query_cache import cache_registry
from service_modules.base import Caller
from service_modules.member_service import member_service

ADMIN = "admin-principal-aaaaa"
USER = "user-principal-bbbbb"

MONTHLY = MembershipPlan(id="PLAN_MONTHLY", name="Monthly", duration_months=1, benefits="Gym floor", price=1500)


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    init_db()
    yield
    for cache_id in cache_registry.ids():
        cache_registry.drop(cache_id)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def grant_role(principal: str, role: UserRole):
    db = get_db_session()
    try:
        db.add(UserRoleORM(principal=principal, role=role.value))
        db.commit()
    finally:
        db.close()


@pytest.fixture
def admin() -> Caller:
    grant_role(ADMIN, UserRole.admin)
    return Caller(principal=ADMIN)


def identity_headers(principal: str) -> dict:
    return {"Authorization": f"Bearer {create_identity_token(principal)}"}


def create_member(admin: Caller, email="a@b.com", password="secret1", name="Asha", phone="+91 98765 43210", plan=MONTHLY):
    request = ManualCreateMemberRequest(
        name=name,
        credentials=Credentials(email=email, password=password),
        phone=phone,
        membership_plan=plan
    )
    return member_service.add_member_with_manual_credentials(admin, request)
