import pytest
from fastapi import HTTPException

from models import (
    AppRole, Credentials, ManualCreateMemberRequest, MembershipStatus,
    CommunicationChannel, CommunicationStatus, UserProfile, WorkoutPlan, Exercise
)
from service_modules.base import Caller, NANOS_PER_DAY
from service_modules.member_service import member_service
from service_modules.communication_service import communication_service
from service_modules.user_service import user_service

from conftest import MONTHLY, USER, create_member


def test_create_member_with_credentials(admin):
    result = create_member(admin, email="  A@B.com ")
    member = result.member

    assert member.email == "a@b.com"
    assert member.membership_status == MembershipStatus.active
    assert member.end_date - member.start_date == 30 * NANOS_PER_DAY
    assert result.credentials.email == "a@b.com"

    channels = [log.channel for log in result.communication_logs]
    assert channels == [CommunicationChannel.email, CommunicationChannel.sms, CommunicationChannel.whatsapp]
    assert all(log.status == CommunicationStatus.sent for log in result.communication_logs)
    assert len(communication_service.get_all_communication_logs(admin)) == 3


def test_welcome_sms_fails_without_phone(admin):
    result = create_member(admin, phone="")
    statuses = {log.channel: log.status for log in result.communication_logs}
    assert statuses[CommunicationChannel.email] == CommunicationStatus.sent
    assert statuses[CommunicationChannel.sms] == CommunicationStatus.failed


@pytest.mark.parametrize("email,password,detail", [
    ("not-an-email", "secret1", "Please enter a valid email address"),
    ("a@b.com", "123", "Password must be at least 6 characters long"),
])
def test_create_member_validation(admin, email, password, detail):
    with pytest.raises(HTTPException) as exc:
        create_member(admin, email=email, password=password)
    assert exc.value.status_code == 400
    assert exc.value.detail == detail


def test_duplicate_email_rejected(admin):
    create_member(admin)
    with pytest.raises(HTTPException) as exc:
        create_member(admin, email="A@b.com")
    assert exc.value.detail == "A member with this email already exists"


def test_non_admin_cannot_create_members():
    with pytest.raises(HTTPException) as exc:
        create_member(Caller(principal=USER))
    assert exc.value.status_code == 403
    assert exc.value.detail.startswith("Unauthorized: Only admins can")


def test_login_returns_stringified_profile(admin):
    created = create_member(admin).member
    serialized = member_service.member_login("a@b.com", "secret1")
    assert serialized.id == str(created.id)
    assert serialized.start_date == str(created.start_date)


def test_login_with_wrong_password(admin):
    create_member(admin)
    with pytest.raises(HTTPException) as exc:
        member_service.member_login("a@b.com", "nope123")
    assert exc.value.status_code == 401
    assert exc.value.detail == "Invalid credentials provided"


def test_add_member_by_name(admin):
    member_id = member_service.add_member(admin, "Walk-in")
    member = member_service.get_member(admin, member_id)
    assert member.name == "Walk-in"
    assert member.membership_status == MembershipStatus.pending
    assert [m.name for m in member_service.get_all_minimal_members(admin)] == ["Walk-in"]


def test_member_can_read_own_record_only(admin):
    mine = create_member(admin).member
    other = create_member(admin, email="c@d.com").member
    me = Caller(member_id=mine.id)

    assert member_service.get_member(me, mine.id).email == "a@b.com"
    with pytest.raises(HTTPException) as exc:
        member_service.get_member(me, other.id)
    assert exc.value.status_code == 403


def test_update_member_profile_limits_fields(admin):
    created = create_member(admin).member
    me = Caller(member_id=created.id)
    attempt = created.model_copy(update={
        "name": "Asha K", "phone": "111", "membership_status": MembershipStatus.expired, "end_date": 1
    })

    updated = member_service.update_member_profile(me, attempt)
    assert updated.name == "Asha K"
    assert updated.phone == "111"
    assert updated.membership_status == MembershipStatus.active
    assert updated.end_date == created.end_date


def test_assign_workout_plan(admin):
    created = create_member(admin).member
    plan = WorkoutPlan(id="W1", name="Strength", duration_weeks=6, exercises=[Exercise(name="Squat", reps=5, sets=5)])
    updated = member_service.update_member_workout_plan(admin, created.id, plan)
    assert updated.workout_plan.exercises[0].name == "Squat"


def test_delete_member(admin):
    created = create_member(admin).member
    member_service.delete_member(admin, created.id)
    with pytest.raises(HTTPException) as exc:
        member_service.get_member(admin, created.id)
    assert exc.value.status_code == 404


def test_registered_members_lists_member_role_profiles(admin):
    user_service.save_caller_user_profile(
        Caller(principal=USER), UserProfile(id=USER, name="Ravi", email="ravi@x.com", role=AppRole.Member)
    )
    registered = member_service.get_registered_members(admin)
    assert [(r.id, r.name) for r in registered] == [(USER, "Ravi")]
