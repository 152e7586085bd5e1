import pytest
from fastapi import HTTPException

from member_session import MemberSession
from models import Expense, ExpenseType, PaymentStatus, UserRole
from profiles import serialize_profile
from query_cache import QueryCache
from service_modules.base import Caller
from service_modules.gym_queries import GymQueries

from test_member_session import make_profile


class FakeBackend:
    """Counts calls so tests can tell cache hits from backend reads."""

    def __init__(self):
        self.caller = Caller()
        self.calls = []
        self.profile = make_profile()

    def _record(self, name, result=None):
        self.calls.append(name)
        return result

    def get_all_members(self):
        return self._record("get_all_members", [self.profile])

    def get_reports(self):
        return self._record("get_reports", "report")

    def get_caller_user_role(self):
        return self._record("get_caller_user_role", UserRole.user)

    def get_member_profile(self):
        return self._record("get_member_profile", self.profile)

    def get_all_payments(self):
        return self._record("get_all_payments", [])

    def get_member_notifications(self):
        return self._record("get_member_notifications", [])

    def get_all_expenses(self):
        return self._record("get_all_expenses", [])

    def member_login(self, email, password):
        self._record("member_login")
        if password != "secret1":
            raise HTTPException(status_code=401, detail="Invalid credentials provided")
        return serialize_profile(self.profile)

    def add_payment_by_email(self, email, amount, status):
        return self._record(("add_payment_by_email", email), "paid-by-email")

    def add_payment_by_phone(self, phone, amount, status):
        return self._record(("add_payment_by_phone", phone), "paid-by-phone")

    def add_member(self, name):
        return self._record("add_member", 7)

    def add_expense(self, expense):
        return self._record("add_expense", expense)

    def update_member_profile(self, profile):
        self._record("update_member_profile")
        return profile

    def assign_role(self, user, role):
        self._record("assign_role")

    def get_my_qr_code(self):
        return self._record("get_my_qr_code", f"GYMQR:{self.profile.id}")

    def update_payment(self, payment):
        return self._record("update_payment", payment)

    def update_member(self, member_id, member):
        return self._record("update_member", member)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def storage():
    return {}


@pytest.fixture
def queries(backend, storage):
    return GymQueries(backend, QueryCache(), MemberSession(storage))


def test_queries_are_cached(queries, backend):
    queries.get_all_members()
    queries.get_all_members()
    assert backend.calls == ["get_all_members"]


def test_add_member_invalidates_members_and_reports(queries, backend):
    queries.get_all_members()
    queries.get_reports()
    queries.get_all_expenses()

    assert queries.add_member("Ravi") == 7
    queries.get_all_members()
    queries.get_reports()
    queries.get_all_expenses()

    assert backend.calls.count("get_all_members") == 2
    assert backend.calls.count("get_reports") == 2
    assert backend.calls.count("get_all_expenses") == 1


def test_add_expense_invalidates_expenses_and_reports(queries, backend):
    queries.get_all_expenses()
    queries.get_reports()
    queries.get_all_members()
    queries.add_expense(Expense(id="", type=ExpenseType.rent, description="", timestamp=0, amount=500))

    assert "expenses" not in queries.cache
    assert "reports" not in queries.cache
    assert "members" in queries.cache


def test_member_login_sets_cache_and_session(queries, backend, storage):
    profile = queries.member_login("a@b.com", "secret1")

    assert profile == backend.profile
    assert queries.cache.get("authenticatedMember") == profile
    assert queries.cache.get("memberProfile") == profile
    assert queries.cache.get(("memberProfileById", str(profile.id))) == profile
    assert queries.session.is_authenticated()
    assert queries.session.cached_profile().email == "a@b.com"


def test_failed_login_leaves_no_session(queries, storage):
    with pytest.raises(HTTPException) as exc:
        queries.member_login("a@b.com", "wrong")
    assert exc.value.status_code == 401
    assert storage == {}
    assert queries.cache.keys() == []


def test_member_profile_prefers_cache_then_session(queries, backend, storage):
    backend.caller = Caller(member_id=backend.profile.id)
    MemberSession(storage).create(backend.profile)

    profile = queries.get_member_profile()
    assert profile == backend.profile
    assert "get_member_profile" not in backend.calls
    assert queries.cache.get("authenticatedMember") == profile


def test_member_profile_for_email_member_without_cache_is_none(queries, backend, storage):
    backend.caller = Caller(member_id=backend.profile.id)
    MemberSession(storage).create(backend.profile)
    storage.pop("memberProfileCache")

    assert queries.get_member_profile() is None
    assert "get_member_profile" not in backend.calls


def test_member_profile_falls_back_to_backend_for_identity_users(queries, backend):
    assert queries.get_member_profile() == backend.profile
    queries.get_member_profile()
    assert backend.calls == ["get_member_profile"]


def test_payment_identifier_routing(queries, backend):
    queries.get_all_payments()
    queries.get_member_notifications()

    assert queries.add_payment_by_identifier(" a@b.com ", 100, PaymentStatus.paid) == "paid-by-email"
    assert queries.add_payment_by_identifier("+91 98765 43210", 100, PaymentStatus.paid) == "paid-by-phone"
    assert ("add_payment_by_email", "a@b.com") in backend.calls
    assert ("add_payment_by_phone", "+91 98765 43210") in backend.calls
    assert "payments" not in queries.cache
    assert "memberNotifications" not in queries.cache


def test_update_member_profile_rewrites_session_cache(queries, backend, storage):
    backend.caller = Caller(member_id=backend.profile.id)
    MemberSession(storage).create(backend.profile)
    queries.get_member_profile()

    updated = backend.profile.model_copy(update={"name": "Asha K"})
    queries.update_member_profile(updated)

    assert MemberSession(storage).cached_profile().name == "Asha K"
    assert queries.get_member_profile().name == "Asha K"


def test_assign_role_invalidates_role(queries, backend):
    queries.get_caller_user_role()
    queries.assign_role("someone", UserRole.admin)
    queries.get_caller_user_role()
    assert backend.calls.count("get_caller_user_role") == 2


def test_member_login_drops_previous_member_data(queries, backend):
    queries.get_my_qr_code()
    queries.get_all_payments()
    assert "myQrCode" in queries.cache

    backend.profile = make_profile(id=99, email="c@d.com")
    profile = queries.member_login("c@d.com", "secret1")

    assert "myQrCode" not in queries.cache
    assert "payments" not in queries.cache
    assert queries.cache.get("authenticatedMember") == profile
    assert queries.session.cached_profile().email == "c@d.com"


def test_identity_caller_ignores_member_session(queries, backend, storage):
    MemberSession(storage).create(make_profile(id=5, email="other@b.com"))
    queries.cache.set("authenticatedMember", make_profile(id=5, email="other@b.com"))
    backend.caller = Caller(principal="user-principal-bbbbb")

    assert queries.get_member_profile() == backend.profile
    assert backend.calls == ["get_member_profile"]


def test_identity_profile_update_leaves_member_session_alone(queries, backend, storage):
    MemberSession(storage).create(make_profile(id=5, email="other@b.com"))
    backend.caller = Caller(principal="user-principal-bbbbb")

    queries.update_member_profile(backend.profile.model_copy(update={"name": "Asha K"}))

    assert MemberSession(storage).cached_profile().email == "other@b.com"
    assert "authenticatedMember" not in queries.cache


def test_update_payment_invalidates_payments_and_reports(queries, backend):
    queries.get_all_payments()
    queries.get_reports()
    queries.get_all_expenses()

    assert queries.update_payment("edited") == "edited"
    assert "payments" not in queries.cache
    assert "reports" not in queries.cache
    assert "expenses" in queries.cache


def test_update_member_invalidates_member_views(queries, backend):
    queries.get_all_members()
    queries.get_reports()
    queries.update_member(backend.profile.id, backend.profile)

    queries.get_all_members()
    assert backend.calls.count("get_all_members") == 2
    assert "reports" not in queries.cache
