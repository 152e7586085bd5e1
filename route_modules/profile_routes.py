"""
Profile Routes - caller profile, roles and account approvals.
"""
from fastapi import APIRouter, Depends
from typing import List, Optional

from models import (
    UserProfile, UserRole, UserApprovalInfo, AssignRoleRequest, SetApprovalRequest
)
from service_modules.gym_backend import GymBackend
from service_modules.gym_queries import GymQueries
from .deps import get_backend, get_queries

router = APIRouter(tags=["Profile"])


@router.get("/api/profile", response_model=Optional[UserProfile])
async def get_caller_user_profile(backend: GymBackend = Depends(get_backend)):
    return backend.get_caller_user_profile()


@router.post("/api/profile")
async def save_caller_user_profile(profile: UserProfile, queries: GymQueries = Depends(get_queries)):
    """Save the caller's profile. The first Admin profile registers the gym admin."""
    queries.save_caller_user_profile(profile)
    return {"status": "saved"}


@router.get("/api/profile/{principal}", response_model=Optional[UserProfile])
async def get_user_profile(principal: str, backend: GymBackend = Depends(get_backend)):
    return backend.get_user_profile(principal)


# --- Roles ---

@router.get("/api/roles/me")
async def get_caller_user_role(backend: GymBackend = Depends(get_backend)):
    return {"role": backend.get_caller_user_role()}


@router.get("/api/roles/admin-registered")
async def is_admin_registered(backend: GymBackend = Depends(get_backend)):
    return {"registered": backend.is_admin_registered()}


@router.get("/api/roles/is-admin")
async def is_caller_admin(backend: GymBackend = Depends(get_backend)):
    return {"is_admin": backend.is_caller_admin()}


@router.get("/api/roles/{principal}")
async def get_user_role(principal: str, backend: GymBackend = Depends(get_backend)):
    return {"role": backend.get_user_role(principal)}


@router.post("/api/roles")
async def assign_role(body: AssignRoleRequest, queries: GymQueries = Depends(get_queries)):
    queries.assign_role(body.user, body.role)
    return {"status": "assigned"}


# --- Approvals ---

@router.post("/api/approvals/request")
async def request_approval(backend: GymBackend = Depends(get_backend)):
    backend.request_approval()
    return {"status": "requested"}


@router.get("/api/approvals", response_model=List[UserApprovalInfo])
async def list_approvals(backend: GymBackend = Depends(get_backend)):
    return backend.list_approvals()


@router.post("/api/approvals")
async def set_approval(body: SetApprovalRequest, backend: GymBackend = Depends(get_backend)):
    backend.set_approval(body.user, body.status)
    return {"status": body.status}


@router.get("/api/approvals/me")
async def is_caller_approved(backend: GymBackend = Depends(get_backend)):
    return {"approved": backend.is_caller_approved()}
