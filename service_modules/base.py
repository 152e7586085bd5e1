"""
Base service utilities and shared imports.
All services should import from here for common functionality.
"""
from fastapi import HTTPException
from dataclasses import dataclass
from typing import Optional
import base64
import uuid
import json
import logging
import secrets
import time
from datetime import date, datetime, timedelta

from auth import ANONYMOUS_PRINCIPAL
from database import get_db_session, Base, engine
from models import MemberProfile, MembershipPlan, WorkoutPlan, DietPlan, UserRole
from models_orm import (
    UserProfileORM, UserRoleORM, ApprovalORM,
    MembershipPlanORM, MemberORM,
    PaymentORM, ExpenseORM,
    AttendanceORM, ClassBookingORM,
    CommunicationLogORM, StripeConfigORM
)

# Re-export for convenience
__all__ = [
    'HTTPException', 'uuid', 'json', 'logging', 'date', 'datetime', 'timedelta',
    'get_db_session', 'Base', 'engine',
    'UserProfileORM', 'UserRoleORM', 'ApprovalORM',
    'MembershipPlanORM', 'MemberORM',
    'PaymentORM', 'ExpenseORM',
    'AttendanceORM', 'ClassBookingORM',
    'CommunicationLogORM', 'StripeConfigORM',
    'Caller', 'ANONYMOUS_PRINCIPAL', 'NANOS_PER_DAY',
    'now_ns', 'generate_principal', 'get_caller_role', 'require_admin',
    'member_to_profile', 'find_caller_member',
]

logger = logging.getLogger("gym_app")

NANOS_PER_DAY = 24 * 60 * 60 * 1_000_000_000


@dataclass(frozen=True)
class Caller:
    """Who is calling the backend: an identity principal or a session member."""
    principal: str = ANONYMOUS_PRINCIPAL
    member_id: Optional[int] = None

    @property
    def is_anonymous(self) -> bool:
        return self.principal == ANONYMOUS_PRINCIPAL


def now_ns() -> int:
    return time.time_ns()


def generate_principal() -> str:
    """Principal-shaped id for members created without an Internet Identity."""
    raw = base64.b32encode(secrets.token_bytes(20)).decode("ascii").lower().rstrip("=")
    return "-".join(raw[i:i + 5] for i in range(0, len(raw), 5))


def get_caller_role(db, principal: str) -> UserRole:
    if principal == ANONYMOUS_PRINCIPAL:
        return UserRole.guest
    row = db.query(UserRoleORM).filter(UserRoleORM.principal == principal).first()
    return UserRole(row.role) if row else UserRole.guest


def require_admin(db, caller: Caller, action: str):
    if get_caller_role(db, caller.principal) != UserRole.admin:
        logger.warning(f"AUTHZ: {caller.principal} denied: {action}")
        raise HTTPException(status_code=403, detail=f"Unauthorized: Only admins can {action}")


def member_to_profile(m: MemberORM) -> MemberProfile:
    return MemberProfile(
        id=m.id,
        principal=m.principal,
        name=m.name,
        email=m.email or "",
        phone=m.phone or "",
        membership_status=m.membership_status,
        start_date=m.start_date or 0,
        end_date=m.end_date or 0,
        membership_plan=MembershipPlan.model_validate_json(m.membership_plan_json),
        workout_plan=WorkoutPlan.model_validate_json(m.workout_plan_json) if m.workout_plan_json else None,
        diet_plan=DietPlan.model_validate_json(m.diet_plan_json) if m.diet_plan_json else None,
        profile_pic=m.profile_pic,
    )


def find_caller_member(db, caller: Caller) -> Optional[MemberORM]:
    """The member record the caller acts as: session member id first, then principal."""
    if caller.member_id is not None:
        return db.query(MemberORM).filter(MemberORM.id == caller.member_id).first()
    if caller.is_anonymous:
        return None
    return db.query(MemberORM).filter(MemberORM.principal == caller.principal).first()
