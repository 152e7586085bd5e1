import json

import pytest

from member_session import MEMBER_AUTH_KEY, PROFILE_CACHE_KEY, MemberSession
from models import MemberProfile, MembershipPlan, MembershipStatus, WorkoutPlan, Exercise
from profiles import LocalProfile, RemoteProfile, normalize_profile, serialize_profile


def make_profile(**overrides) -> MemberProfile:
    data = dict(
        id=12345678901234567,
        principal="abcde-fghij",
        name="Asha",
        email="a@b.com",
        phone="9876543210",
        membership_status=MembershipStatus.active,
        start_date=1_700_000_000_000_000_000,
        end_date=1_702_592_000_000_000_000,
        membership_plan=MembershipPlan(id="P1", name="Monthly", duration_months=1, benefits="", price=1500),
        workout_plan=WorkoutPlan(
            id="W1", name="Push", description="", duration_weeks=4,
            exercises=[Exercise(name="Bench", reps=8, sets=3, weight_kg=60)]
        ),
    )
    data.update(overrides)
    return MemberProfile(**data)


def test_serialize_then_normalize_restores_ints():
    profile = make_profile()
    serialized = serialize_profile(profile)
    assert serialized.id == "12345678901234567"
    assert serialized.start_date == "1700000000000000000"

    restored = normalize_profile(LocalProfile(serialized))
    assert restored == profile
    assert isinstance(restored.id, int)
    assert isinstance(restored.end_date, int)


def test_normalize_accepts_plain_dict():
    profile = make_profile()
    data = json.loads(serialize_profile(profile).model_dump_json())
    assert normalize_profile(LocalProfile(data)) == profile


def test_remote_profile_passes_through():
    profile = make_profile()
    assert normalize_profile(RemoteProfile(profile)) is profile


def test_normalize_rejects_non_numeric_id():
    data = json.loads(serialize_profile(make_profile()).model_dump_json())
    data["id"] = "twelve"
    with pytest.raises(ValueError):
        normalize_profile(LocalProfile(data))


def test_normalize_rejects_unknown_source():
    with pytest.raises(TypeError):
        normalize_profile({"id": "1"})


def test_create_writes_both_keys():
    storage = {}
    session = MemberSession(storage)
    auth = session.create(make_profile())

    stored = json.loads(storage[MEMBER_AUTH_KEY])
    assert stored == {"email": "a@b.com", "memberId": "12345678901234567", "authenticated": True}
    assert auth.member_id == "12345678901234567"
    assert session.is_authenticated()
    assert session.cached_profile() == make_profile()


def test_store_and_read_back_round_trip():
    storage = {}
    MemberSession(storage).create(make_profile())

    # A new request sees only the stored text
    reread = MemberSession(dict(storage)).cached_profile()
    assert reread == make_profile()
    assert isinstance(reread.start_date, int)


def test_missing_record_is_not_authenticated():
    session = MemberSession({})
    assert session.read() is None
    assert not session.is_authenticated()


def test_malformed_auth_clears_both_keys():
    storage = {MEMBER_AUTH_KEY: "{not json", PROFILE_CACHE_KEY: "{}"}
    session = MemberSession(storage)

    assert session.read() is None
    assert MEMBER_AUTH_KEY not in storage
    assert PROFILE_CACHE_KEY not in storage


def test_non_object_auth_clears_both_keys():
    storage = {MEMBER_AUTH_KEY: "[1, 2]", PROFILE_CACHE_KEY: "{}"}
    assert not MemberSession(storage).is_authenticated()
    assert storage == {}


def test_unauthenticated_flag_is_respected():
    storage = {MEMBER_AUTH_KEY: json.dumps({"authenticated": False, "email": "a@b.com", "memberId": "1"})}
    assert not MemberSession(storage).is_authenticated()


def test_corrupt_profile_cache_keeps_auth():
    storage = {}
    session = MemberSession(storage)
    session.create(make_profile())
    storage[PROFILE_CACHE_KEY] = "garbage"

    assert session.cached_profile() is None
    assert session.is_authenticated()


def test_update_profile_only_when_authenticated():
    session = MemberSession({})
    assert session.update_profile(make_profile()) is False

    session.create(make_profile())
    assert session.update_profile(make_profile(name="Asha K")) is True
    assert session.cached_profile().name == "Asha K"


def test_invalidate_removes_everything():
    storage = {"other": "kept"}
    session = MemberSession(storage)
    session.create(make_profile())
    session.invalidate()
    assert storage == {"other": "kept"}
