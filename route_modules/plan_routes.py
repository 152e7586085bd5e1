"""
Plan Routes - membership plan catalogue.
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import List

from models import MembershipPlan
from service_modules.gym_backend import GymBackend
from service_modules.gym_queries import GymQueries
from .deps import get_backend, get_queries

router = APIRouter(tags=["Plans"])


@router.get("/api/plans", response_model=List[MembershipPlan])
async def get_all_membership_plans(backend: GymBackend = Depends(get_backend)):
    return backend.get_all_membership_plans()


@router.get("/api/plans/{plan_id}", response_model=MembershipPlan)
async def get_membership_plan(plan_id: str, backend: GymBackend = Depends(get_backend)):
    return backend.get_membership_plan(plan_id)


@router.post("/api/plans", response_model=MembershipPlan)
async def add_membership_plan(plan: MembershipPlan, queries: GymQueries = Depends(get_queries)):
    return queries.add_membership_plan(plan)


@router.put("/api/plans/{plan_id}", response_model=MembershipPlan)
async def update_membership_plan(plan_id: str, plan: MembershipPlan, queries: GymQueries = Depends(get_queries)):
    if plan.id != plan_id:
        raise HTTPException(status_code=400, detail="Plan id does not match the URL")
    return queries.update_membership_plan(plan)


@router.delete("/api/plans/{plan_id}")
async def delete_membership_plan(plan_id: str, queries: GymQueries = Depends(get_queries)):
    return queries.delete_membership_plan(plan_id)
