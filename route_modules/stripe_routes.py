"""
Stripe Routes - checkout for membership payments.
"""
from fastapi import APIRouter, Depends
import json

from models import StripeConfiguration, CheckoutSessionRequest
from service_modules.gym_backend import GymBackend
from .deps import get_backend

router = APIRouter(tags=["Stripe"])


@router.get("/api/stripe/configured")
async def is_stripe_configured(backend: GymBackend = Depends(get_backend)):
    return {"configured": backend.is_stripe_configured()}


@router.post("/api/stripe/configuration")
async def set_stripe_configuration(config: StripeConfiguration, backend: GymBackend = Depends(get_backend)):
    backend.set_stripe_configuration(config)
    return {"status": "configured"}


@router.post("/api/stripe/checkout-session")
async def create_checkout_session(body: CheckoutSessionRequest, backend: GymBackend = Depends(get_backend)):
    session = backend.create_checkout_session(body.items, body.success_url, body.cancel_url)
    return json.loads(session)


@router.get("/api/stripe/session/{session_id}")
async def get_stripe_session_status(session_id: str, backend: GymBackend = Depends(get_backend)):
    return backend.get_stripe_session_status(session_id)
