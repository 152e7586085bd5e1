"""
Member profile shapes and the single normalization between them.

A profile arrives either as a live MemberProfile (RemoteProfile, fetched
from the backend) or as its serialized form with the big-integer fields
stringified (LocalProfile, returned by member login and kept in the
session cache). Everything downstream works with MemberProfile.
"""
from dataclasses import dataclass
from typing import Union

from models import MemberProfile, SerializedMemberProfile


@dataclass(frozen=True)
class LocalProfile:
    data: Union[SerializedMemberProfile, dict]


@dataclass(frozen=True)
class RemoteProfile:
    profile: MemberProfile


ProfileSource = Union[LocalProfile, RemoteProfile]


def _to_int(field: str, value) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{field} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text.lstrip("-").isdigit():
        raise ValueError(f"{field} must be an integer, got {value!r}")
    return int(text)


def normalize_profile(source: ProfileSource) -> MemberProfile:
    """Return the MemberProfile for either profile shape."""
    if isinstance(source, RemoteProfile):
        return source.profile
    if not isinstance(source, LocalProfile):
        raise TypeError(f"Unsupported profile source: {type(source).__name__}")

    data = source.data
    if isinstance(data, dict):
        data = SerializedMemberProfile.model_validate(data)

    return MemberProfile(
        id=_to_int("id", data.id),
        principal=data.principal,
        name=data.name,
        email=data.email,
        phone=data.phone,
        membership_status=data.membership_status,
        start_date=_to_int("start_date", data.start_date),
        end_date=_to_int("end_date", data.end_date),
        membership_plan=data.membership_plan,
        workout_plan=data.workout_plan,
        diet_plan=data.diet_plan,
        profile_pic=data.profile_pic,
    )


def serialize_profile(profile: MemberProfile) -> SerializedMemberProfile:
    return SerializedMemberProfile(
        id=str(profile.id),
        principal=profile.principal,
        name=profile.name,
        email=profile.email,
        phone=profile.phone,
        membership_status=profile.membership_status,
        start_date=str(profile.start_date),
        end_date=str(profile.end_date),
        membership_plan=profile.membership_plan,
        workout_plan=profile.workout_plan,
        diet_plan=profile.diet_plan,
        profile_pic=profile.profile_pic,
    )
