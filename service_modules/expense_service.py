"""
Expense Service - gym running costs.
"""
from .base import (
    HTTPException, logging, uuid,
    get_db_session, ExpenseORM, Caller, require_admin, now_ns
)
from models import Expense
from typing import List

logger = logging.getLogger("gym_app")


class ExpenseService:

    def get_all_expenses(self, caller: Caller) -> List[Expense]:
        db = get_db_session()
        try:
            require_admin(db, caller, "view expenses")
            rows = db.query(ExpenseORM).order_by(ExpenseORM.timestamp.desc()).all()
            return [self._expense_to_model(e) for e in rows]
        finally:
            db.close()

    def add_expense(self, caller: Caller, expense: Expense) -> Expense:
        if expense.amount <= 0:
            raise HTTPException(status_code=400, detail="Amount must be greater than zero")
        db = get_db_session()
        try:
            require_admin(db, caller, "record expenses")
            expense_id = expense.id or f"EXP_{uuid.uuid4().hex[:12]}"
            if db.query(ExpenseORM).filter(ExpenseORM.id == expense_id).first():
                raise HTTPException(status_code=400, detail="Expense already exists")
            row = ExpenseORM(
                id=expense_id,
                type=expense.type.value,
                description=expense.description,
                amount=expense.amount,
                timestamp=expense.timestamp or now_ns()
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            logger.info(f"EXPENSE: Recorded {row.type} expense {row.id} of {row.amount}")
            return self._expense_to_model(row)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to record expense: {str(e)}")
        finally:
            db.close()

    def delete_expense(self, caller: Caller, expense_id: str) -> dict:
        db = get_db_session()
        try:
            require_admin(db, caller, "delete expenses")
            row = db.query(ExpenseORM).filter(ExpenseORM.id == expense_id).first()
            if not row:
                raise HTTPException(status_code=404, detail="Expense not found")
            db.delete(row)
            db.commit()
            return {"status": "success", "message": "Expense deleted"}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to delete expense: {str(e)}")
        finally:
            db.close()

    def _expense_to_model(self, e: ExpenseORM) -> Expense:
        return Expense(
            id=e.id,
            type=e.type,
            description=e.description or "",
            timestamp=e.timestamp,
            amount=e.amount
        )


# Singleton instance
expense_service = ExpenseService()

def get_expense_service() -> ExpenseService:
    """Dependency injection helper."""
    return expense_service
