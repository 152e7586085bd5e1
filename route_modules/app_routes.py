"""
App Routes - the dashboard shell.

Each request resolves which view applies (login, loading, error panel,
admin or member dashboard) and serves that dashboard's data through the
per-session query cache.
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from typing import Callable, Optional
import logging

from auth import get_identity
from identity_resolver import FetchResult, FetchState, IdentityInputs, ViewKind, resolve_view
from member_session import MemberSession
from models import (
    UserRole, MemberLoginRequest, MemberProfile, ManualCreateMemberRequest, MembershipPlan,
    Payment, PaymentByIdentifierRequest, Expense, ClassBooking, WorkoutPlan, DietPlan
)
from service_modules.gym_queries import (
    GymQueries, CURRENT_USER_PROFILE, USER_ROLE, MEMBER_PROFILE, AUTHENTICATED_MEMBER
)
from .deps import bind_session_cache, drop_session_cache, get_queries, member_cache_owner

logger = logging.getLogger("gym_app")
router = APIRouter(tags=["App"])


def _fetch(loader: Callable) -> FetchResult:
    try:
        return FetchResult.ok(loader())
    except HTTPException as e:
        return FetchResult.failed(str(e.detail))
    except SQLAlchemyError as e:
        logger.error(f"APP: Query failed: {e}")
        return FetchResult.failed("Backend query failed")


def build_view(queries: GymQueries, identity: Optional[str]):
    session = queries.session
    is_member = session.is_authenticated()
    inputs = IdentityInputs(member_session=session, identity=identity)

    if identity is None and not is_member:
        return resolve_view(inputs)

    inputs.backend_available = queries.backend.ping()
    if not inputs.backend_available:
        return resolve_view(inputs)

    if identity is None:
        inputs.member_profile = _fetch(queries.get_member_profile)
        return resolve_view(inputs)

    inputs.user_profile = _fetch(queries.get_caller_user_profile)
    inputs.user_role = _fetch(queries.get_caller_user_role)
    if inputs.user_role.state == FetchState.success and inputs.user_role.data != UserRole.admin:
        inputs.member_profile = _fetch(queries.get_member_profile)
    return resolve_view(inputs)


def _view_response(view, status_code: int = 403):
    return JSONResponse(status_code=status_code, content={"view": view.to_dict()})


@router.get("/api/app/view")
async def get_view(
    retry: bool = False,
    identity: Optional[str] = Depends(get_identity),
    queries: GymQueries = Depends(get_queries)
):
    """Which screen applies. retry=true refetches the identity queries first."""
    if retry:
        for key in (CURRENT_USER_PROFILE, USER_ROLE, MEMBER_PROFILE, AUTHENTICATED_MEMBER):
            queries.cache.invalidate(key)
    return {"view": build_view(queries, identity).to_dict()}


@router.post("/api/app/member-login")
async def member_login(
    body: MemberLoginRequest,
    request: Request,
    queries: GymQueries = Depends(get_queries)
):
    profile = queries.member_login(body.email, body.password)
    bind_session_cache(request.session, member_cache_owner(profile.id), queries.cache)
    return {"profile": profile.model_dump(mode="json")}


@router.post("/api/app/logout")
async def logout(request: Request):
    MemberSession(request.session).invalidate()
    drop_session_cache(request.session)
    response = JSONResponse(content={"status": "logged_out"})
    response.delete_cookie("access_token")
    return response


# --- Member portal ---

@router.get("/api/app/portal")
async def get_portal(
    identity: Optional[str] = Depends(get_identity),
    queries: GymQueries = Depends(get_queries)
):
    view = build_view(queries, identity)
    if view.kind != ViewKind.member_dashboard or view.profile is None:
        return _view_response(view)

    return {
        "view": view.to_dict(),
        "payments": [p.model_dump(mode="json") for p in queries.get_member_payments()],
        "notifications": [n.model_dump(mode="json") for n in queries.get_member_notifications()],
        "attendance": [a.model_dump(mode="json") for a in queries.get_member_attendance()],
        "bookings": [b.model_dump(mode="json") for b in queries.get_member_class_bookings()],
        "plans": [p.model_dump(mode="json") for p in queries.get_all_membership_plans()],
        "qr": queries.get_my_qr_code(),
    }


@router.put("/api/app/portal/profile")
async def update_portal_profile(profile: MemberProfile, queries: GymQueries = Depends(get_queries)):
    updated = queries.update_member_profile(profile)
    return {"profile": updated.model_dump(mode="json")}


@router.post("/api/app/portal/check-in")
async def portal_check_in(queries: GymQueries = Depends(get_queries)):
    return queries.check_in()


@router.post("/api/app/portal/check-out")
async def portal_check_out(queries: GymQueries = Depends(get_queries)):
    return queries.check_out()


@router.post("/api/app/portal/bookings")
async def portal_add_booking(booking: ClassBooking, queries: GymQueries = Depends(get_queries)):
    return queries.add_class_booking(booking)


@router.put("/api/app/portal/bookings/{booking_id}")
async def portal_update_booking(booking_id: str, booking: ClassBooking, queries: GymQueries = Depends(get_queries)):
    queries.update_class_booking(booking_id, booking)
    return {"status": "updated"}


# --- Admin dashboard ---

@router.get("/api/app/admin")
async def get_admin_dashboard(
    identity: Optional[str] = Depends(get_identity),
    queries: GymQueries = Depends(get_queries)
):
    view = build_view(queries, identity)
    if view.kind != ViewKind.admin_dashboard:
        return _view_response(view)

    return {
        "view": view.to_dict(),
        "members": [m.model_dump(mode="json") for m in queries.get_all_members()],
        "registered_members": [m.model_dump(mode="json") for m in queries.get_registered_members()],
        "plans": [p.model_dump(mode="json") for p in queries.get_all_membership_plans()],
        "payments": [p.model_dump(mode="json") for p in queries.get_all_payments()],
        "expenses": [e.model_dump(mode="json") for e in queries.get_all_expenses()],
        "reports": queries.get_reports().model_dump(mode="json"),
    }


@router.post("/api/app/admin/members")
async def admin_create_member(request: ManualCreateMemberRequest, queries: GymQueries = Depends(get_queries)):
    return queries.add_member_with_manual_credentials(request)


@router.delete("/api/app/admin/members/{member_id}")
async def admin_delete_member(member_id: int, queries: GymQueries = Depends(get_queries)):
    queries.delete_member(member_id)
    return {"status": "deleted"}


@router.put("/api/app/admin/members/{member_id}/workout-plan")
async def admin_update_workout_plan(member_id: int, plan: WorkoutPlan, queries: GymQueries = Depends(get_queries)):
    queries.update_member_workout_plan(member_id, plan)
    return {"status": "updated"}


@router.put("/api/app/admin/members/{member_id}/diet-plan")
async def admin_update_diet_plan(member_id: int, plan: DietPlan, queries: GymQueries = Depends(get_queries)):
    queries.update_member_diet_plan(member_id, plan)
    return {"status": "updated"}


@router.post("/api/app/admin/payments")
async def admin_record_payment(body: PaymentByIdentifierRequest, queries: GymQueries = Depends(get_queries)):
    """Record a payment against a member's email address or phone number."""
    return queries.add_payment_by_identifier(body.identifier, body.amount, body.status)


@router.post("/api/app/admin/expenses")
async def admin_add_expense(expense: Expense, queries: GymQueries = Depends(get_queries)):
    return queries.add_expense(expense)


@router.get("/api/app/admin/members/{member_id}")
async def admin_get_member(member_id: int, queries: GymQueries = Depends(get_queries)):
    return queries.get_member_by_id(member_id).model_dump(mode="json")


@router.put("/api/app/admin/members/{member_id}")
async def admin_update_member(member_id: int, member: MemberProfile, queries: GymQueries = Depends(get_queries)):
    return queries.update_member(member_id, member)


@router.put("/api/app/admin/payments/{payment_id}")
async def admin_update_payment(payment_id: str, payment: Payment, queries: GymQueries = Depends(get_queries)):
    if payment.id != payment_id:
        raise HTTPException(status_code=400, detail="Payment id does not match the URL")
    return queries.update_payment(payment)


@router.delete("/api/app/admin/payments/{payment_id}")
async def admin_delete_payment(payment_id: str, queries: GymQueries = Depends(get_queries)):
    return queries.delete_payment(payment_id)


@router.delete("/api/app/admin/expenses/{expense_id}")
async def admin_delete_expense(expense_id: str, queries: GymQueries = Depends(get_queries)):
    return queries.delete_expense(expense_id)


@router.post("/api/app/admin/plans")
async def admin_add_plan(plan: MembershipPlan, queries: GymQueries = Depends(get_queries)):
    return queries.add_membership_plan(plan)


@router.put("/api/app/admin/plans/{plan_id}")
async def admin_update_plan(plan_id: str, plan: MembershipPlan, queries: GymQueries = Depends(get_queries)):
    if plan.id != plan_id:
        raise HTTPException(status_code=400, detail="Plan id does not match the URL")
    return queries.update_membership_plan(plan)


@router.delete("/api/app/admin/plans/{plan_id}")
async def admin_delete_plan(plan_id: str, queries: GymQueries = Depends(get_queries)):
    return queries.delete_membership_plan(plan_id)
