import pytest
from fastapi import HTTPException

from models import AppRole, ApprovalStatus, MembershipPlan, UserProfile, UserRole
from service_modules.base import Caller
from service_modules.plan_service import plan_service
from service_modules.user_service import user_service

from conftest import ADMIN, USER


def profile(principal, role=AppRole.Admin, name="Boss"):
    return UserProfile(id=principal, name=name, email=f"{name.lower()}@gym.com", role=role)


def test_first_admin_registration():
    first = Caller(principal=ADMIN)
    assert not user_service.is_admin_registered()

    user_service.save_caller_user_profile(first, profile(ADMIN))
    assert user_service.is_admin_registered()
    assert user_service.get_caller_user_role(first) == UserRole.admin
    assert user_service.get_caller_user_profile(first).name == "Boss"


def test_second_admin_cannot_self_promote():
    user_service.save_caller_user_profile(Caller(principal=ADMIN), profile(ADMIN))
    with pytest.raises(HTTPException) as exc:
        user_service.save_caller_user_profile(Caller(principal=USER), profile(USER, name="Sneaky"))
    assert exc.value.status_code == 403
    assert user_service.get_caller_user_role(Caller(principal=USER)) == UserRole.guest


def test_member_registration_gets_user_role():
    caller = Caller(principal=USER)
    user_service.save_caller_user_profile(caller, profile(USER, role=AppRole.Member, name="Ravi"))
    assert user_service.get_caller_user_role(caller) == UserRole.user


def test_anonymous_cannot_save_profile():
    with pytest.raises(HTTPException) as exc:
        user_service.save_caller_user_profile(Caller(), profile("x"))
    assert exc.value.status_code == 401


def test_unknown_principal_is_guest():
    assert user_service.get_caller_user_role(Caller(principal="new-face")) == UserRole.guest
    assert user_service.get_caller_user_role(Caller()) == UserRole.guest


def test_assign_role_requires_admin(admin):
    with pytest.raises(HTTPException):
        user_service.assign_role(Caller(principal=USER), USER, UserRole.admin)

    user_service.assign_role(admin, USER, UserRole.admin)
    assert user_service.is_caller_admin(Caller(principal=USER))


def test_approvals(admin):
    caller = Caller(principal=USER)
    assert not user_service.is_caller_approved(caller)

    user_service.request_approval(caller)
    assert [a.status for a in user_service.list_approvals(admin)] == [ApprovalStatus.pending]

    user_service.set_approval(admin, USER, ApprovalStatus.approved)
    assert user_service.is_caller_approved(caller)
    assert user_service.is_caller_approved(admin)


def test_membership_plans(admin):
    plan = plan_service.add_membership_plan(
        admin, MembershipPlan(id="", name="Quarterly", duration_months=3, benefits="Pool", price=4000)
    )
    assert plan.id.startswith("PLAN_")
    assert plan_service.get_membership_plan(plan.id).price == 4000

    plan_service.update_membership_plan(admin, plan.model_copy(update={"price": 3800}))
    assert plan_service.get_all_membership_plans()[0].price == 3800

    plan_service.delete_membership_plan(admin, plan.id)
    with pytest.raises(HTTPException) as exc:
        plan_service.get_membership_plan(plan.id)
    assert exc.value.status_code == 404


def test_plan_validation(admin):
    with pytest.raises(HTTPException) as exc:
        plan_service.add_membership_plan(
            admin, MembershipPlan(id="", name="Broken", duration_months=0, price=100)
        )
    assert exc.value.status_code == 400
