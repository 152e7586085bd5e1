"""
Routes package - organized API routes.

This package provides modular route definitions.
Import the combined router for use in main.py.
"""
from fastapi import APIRouter

from .auth_routes import router as auth_router
from .profile_routes import router as profile_router
from .member_routes import router as member_router
from .plan_routes import router as plan_router
from .finance_routes import router as finance_router
from .attendance_routes import router as attendance_router
from .report_routes import router as report_router
from .stripe_routes import router as stripe_router
from .app_routes import router as app_router

# Combined router that includes all sub-routers
combined_router = APIRouter()
combined_router.include_router(auth_router)
combined_router.include_router(profile_router)
combined_router.include_router(member_router)
combined_router.include_router(plan_router)
combined_router.include_router(finance_router)
combined_router.include_router(attendance_router)
combined_router.include_router(report_router)
combined_router.include_router(stripe_router)
combined_router.include_router(app_router)

__all__ = [
    'combined_router', 'auth_router', 'profile_router', 'member_router', 'plan_router',
    'finance_router', 'attendance_router', 'report_router', 'stripe_router', 'app_router'
]
