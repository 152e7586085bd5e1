"""
Stripe Service - checkout sessions for membership payments.
"""
from .base import (
    HTTPException, json, logging, datetime,
    get_db_session, StripeConfigORM, Caller, require_admin
)
from models import (
    ShoppingItem, StripeConfiguration,
    StripeSessionStatus, StripeSessionCompleted, StripeSessionFailed
)
from typing import List, Optional
import os
import stripe

logger = logging.getLogger("gym_app")


def _usable_key(api_key: Optional[str]) -> bool:
    """A real Stripe key, not an empty or placeholder value."""
    return bool(api_key) and not api_key.startswith("your_") and len(api_key) > 20


class StripeService:

    def _load_config(self, db) -> Optional[StripeConfiguration]:
        row = db.query(StripeConfigORM).filter(StripeConfigORM.id == 1).first()
        if row and _usable_key(row.secret_key):
            countries = [c for c in (row.allowed_countries or "").split(",") if c]
            return StripeConfiguration(secret_key=row.secret_key, allowed_countries=countries)
        env_key = os.environ.get("STRIPE_SECRET_KEY")
        if _usable_key(env_key):
            return StripeConfiguration(secret_key=env_key, allowed_countries=[])
        return None

    def is_stripe_configured(self) -> bool:
        db = get_db_session()
        try:
            return self._load_config(db) is not None
        finally:
            db.close()

    def set_stripe_configuration(self, caller: Caller, config: StripeConfiguration) -> None:
        if not _usable_key(config.secret_key):
            raise HTTPException(status_code=400, detail="Invalid Stripe secret key")
        db = get_db_session()
        try:
            require_admin(db, caller, "configure Stripe")
            row = db.query(StripeConfigORM).filter(StripeConfigORM.id == 1).first()
            if row is None:
                row = StripeConfigORM(id=1)
                db.add(row)
            row.secret_key = config.secret_key
            row.allowed_countries = ",".join(c.upper() for c in config.allowed_countries)
            row.updated_at = datetime.utcnow().isoformat()
            db.commit()
            logger.info("STRIPE: Configuration updated")
        finally:
            db.close()

    def create_checkout_session(self, caller: Caller, items: List[ShoppingItem], success_url: str, cancel_url: str) -> str:
        """Create a Checkout Session and return {"id", "url"} as JSON text."""
        if not items:
            raise HTTPException(status_code=400, detail="At least one item is required")

        db = get_db_session()
        try:
            config = self._load_config(db)
        finally:
            db.close()
        if config is None:
            raise HTTPException(status_code=400, detail="Stripe is not configured")

        params = {
            "api_key": config.secret_key,
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": item.currency,
                        "product_data": {
                            "name": item.product_name,
                            "description": item.product_description or None,
                        },
                        "unit_amount": item.price_in_cents,
                    },
                    "quantity": item.quantity,
                }
                for item in items
            ],
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        if not caller.is_anonymous:
            params["client_reference_id"] = caller.principal
        if config.allowed_countries:
            params["shipping_address_collection"] = {"allowed_countries": config.allowed_countries}

        try:
            session = stripe.checkout.Session.create(**params)
        except stripe.StripeError as e:
            logger.error(f"STRIPE: Checkout session failed: {e}")
            raise HTTPException(status_code=502, detail=f"Stripe error: {str(e)}")

        logger.info(f"STRIPE: Created checkout session {session.id}")
        return json.dumps({"id": session.id, "url": session.url})

    def get_stripe_session_status(self, session_id: str) -> StripeSessionStatus:
        db = get_db_session()
        try:
            config = self._load_config(db)
        finally:
            db.close()
        if config is None:
            return StripeSessionFailed(error="Stripe is not configured")

        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=config.secret_key)
        except stripe.StripeError as e:
            logger.warning(f"STRIPE: Could not retrieve session {session_id}: {e}")
            return StripeSessionFailed(error=str(e))

        if session.payment_status == "paid" or session.status == "complete":
            return StripeSessionCompleted(
                response=json.dumps({"id": session.id, "payment_status": session.payment_status}),
                user_principal=session.client_reference_id
            )
        return StripeSessionFailed(error=f"Session status: {session.status}")


# Singleton instance
stripe_service = StripeService()

def get_stripe_service() -> StripeService:
    """Dependency injection helper."""
    return stripe_service
