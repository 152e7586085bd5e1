"""
Plan Service - membership plans offered by the gym.
"""
from .base import (
    HTTPException, logging, uuid,
    get_db_session, MembershipPlanORM, Caller, require_admin
)
from models import MembershipPlan
from typing import List

logger = logging.getLogger("gym_app")


class PlanService:
    """Service for managing membership plans."""

    def get_all_membership_plans(self) -> List[MembershipPlan]:
        db = get_db_session()
        try:
            plans = db.query(MembershipPlanORM).order_by(MembershipPlanORM.price, MembershipPlanORM.name).all()
            return [self._plan_to_model(p) for p in plans]
        finally:
            db.close()

    def get_membership_plan(self, plan_id: str) -> MembershipPlan:
        db = get_db_session()
        try:
            plan = db.query(MembershipPlanORM).filter(MembershipPlanORM.id == plan_id).first()
            if not plan:
                raise HTTPException(status_code=404, detail="Membership plan not found")
            return self._plan_to_model(plan)
        finally:
            db.close()

    def add_membership_plan(self, caller: Caller, plan: MembershipPlan) -> MembershipPlan:
        self._validate(plan)
        db = get_db_session()
        try:
            require_admin(db, caller, "add membership plans")
            plan_id = plan.id or f"PLAN_{uuid.uuid4().hex[:12]}"
            if db.query(MembershipPlanORM).filter(MembershipPlanORM.id == plan_id).first():
                raise HTTPException(status_code=400, detail="Membership plan already exists")

            row = MembershipPlanORM(
                id=plan_id,
                name=plan.name,
                duration_months=plan.duration_months,
                benefits=plan.benefits,
                price=plan.price
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            logger.info(f"PLAN: Created membership plan {plan_id} ({plan.name})")
            return self._plan_to_model(row)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=str(e))
        finally:
            db.close()

    def update_membership_plan(self, caller: Caller, plan: MembershipPlan) -> MembershipPlan:
        self._validate(plan)
        db = get_db_session()
        try:
            require_admin(db, caller, "update membership plans")
            row = db.query(MembershipPlanORM).filter(MembershipPlanORM.id == plan.id).first()
            if not row:
                raise HTTPException(status_code=404, detail="Membership plan not found")

            for key in ["name", "duration_months", "benefits", "price"]:
                setattr(row, key, getattr(plan, key))

            db.commit()
            db.refresh(row)
            return self._plan_to_model(row)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=str(e))
        finally:
            db.close()

    def delete_membership_plan(self, caller: Caller, plan_id: str) -> dict:
        db = get_db_session()
        try:
            require_admin(db, caller, "delete membership plans")
            row = db.query(MembershipPlanORM).filter(MembershipPlanORM.id == plan_id).first()
            if not row:
                raise HTTPException(status_code=404, detail="Membership plan not found")
            db.delete(row)
            db.commit()
            logger.info(f"PLAN: Deleted membership plan {plan_id}")
            return {"status": "success", "message": "Membership plan deleted"}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=str(e))
        finally:
            db.close()

    def _validate(self, plan: MembershipPlan):
        if not plan.name.strip():
            raise HTTPException(status_code=400, detail="Plan name is required")
        if plan.duration_months <= 0:
            raise HTTPException(status_code=400, detail="Plan duration must be at least one month")
        if plan.price < 0:
            raise HTTPException(status_code=400, detail="Plan price cannot be negative")

    def _plan_to_model(self, p: MembershipPlanORM) -> MembershipPlan:
        return MembershipPlan(
            id=p.id,
            name=p.name,
            duration_months=p.duration_months,
            benefits=p.benefits or "",
            price=p.price
        )


# Singleton instance
plan_service = PlanService()

def get_plan_service() -> PlanService:
    """Dependency injection helper."""
    return plan_service
