"""
Member Routes - member records, credentials and per-member plans.
"""
from fastapi import APIRouter, Depends
from typing import List, Optional

from models import (
    MemberProfile, MinimalMember, RegisteredMemberInfo, SerializedMemberProfile,
    ManualCreateMemberRequest, ManualCreateMemberResponse, AddMemberRequest,
    MemberLoginRequest, WorkoutPlan, DietPlan
)
from service_modules.gym_backend import GymBackend
from service_modules.gym_queries import GymQueries
from .deps import get_backend, get_queries

router = APIRouter(tags=["Members"])


@router.get("/api/members", response_model=List[MemberProfile])
async def get_all_members(backend: GymBackend = Depends(get_backend)):
    return backend.get_all_members()


@router.get("/api/members/minimal", response_model=List[MinimalMember])
async def get_all_minimal_members(backend: GymBackend = Depends(get_backend)):
    return backend.get_all_minimal_members()


@router.get("/api/members/registered", response_model=List[RegisteredMemberInfo])
async def get_registered_members(backend: GymBackend = Depends(get_backend)):
    """Users who signed up with the Member role."""
    return backend.get_registered_members()


@router.get("/api/members/me", response_model=Optional[MemberProfile])
async def get_member_profile(backend: GymBackend = Depends(get_backend)):
    return backend.get_member_profile()


@router.put("/api/members/me", response_model=MemberProfile)
async def update_member_profile(profile: MemberProfile, queries: GymQueries = Depends(get_queries)):
    """Members may change their name, phone and profile picture."""
    return queries.update_member_profile(profile)


@router.post("/api/members/login", response_model=SerializedMemberProfile)
async def member_login(body: MemberLoginRequest, backend: GymBackend = Depends(get_backend)):
    return backend.member_login(body.email, body.password)


@router.post("/api/members")
async def add_member(body: AddMemberRequest, queries: GymQueries = Depends(get_queries)):
    return {"id": queries.add_member(body.name)}


@router.post("/api/members/manual", response_model=ManualCreateMemberResponse)
async def add_member_with_manual_credentials(
    request: ManualCreateMemberRequest,
    queries: GymQueries = Depends(get_queries)
):
    """Create an active member with login credentials and send welcome messages."""
    return queries.add_member_with_manual_credentials(request)


@router.get("/api/members/{member_id}", response_model=MemberProfile)
async def get_member(member_id: int, backend: GymBackend = Depends(get_backend)):
    return backend.get_member(member_id)


@router.put("/api/members/{member_id}", response_model=MemberProfile)
async def update_member(member_id: int, member: MemberProfile, queries: GymQueries = Depends(get_queries)):
    return queries.update_member(member_id, member)


@router.delete("/api/members/{member_id}")
async def delete_member(member_id: int, queries: GymQueries = Depends(get_queries)):
    return queries.delete_member(member_id)


@router.put("/api/members/{member_id}/workout-plan", response_model=MemberProfile)
async def update_member_workout_plan(member_id: int, plan: WorkoutPlan, queries: GymQueries = Depends(get_queries)):
    return queries.update_member_workout_plan(member_id, plan)


@router.put("/api/members/{member_id}/diet-plan", response_model=MemberProfile)
async def update_member_diet_plan(member_id: int, plan: DietPlan, queries: GymQueries = Depends(get_queries)):
    return queries.update_member_diet_plan(member_id, plan)
