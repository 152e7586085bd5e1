"""
Payment Service - membership payments recorded by the admin.
"""
from .base import (
    HTTPException, logging, uuid,
    get_db_session, PaymentORM, MemberORM,
    Caller, require_admin, find_caller_member, now_ns
)
from models import Payment, PaymentStatus
from sqlalchemy import or_
from typing import List

logger = logging.getLogger("gym_app")


def normalize_phone(phone: str) -> str:
    return "".join(ch for ch in (phone or "") if ch.isdigit() or ch == "+")


class PaymentService:
    """Service for recording and querying payments."""

    def get_all_payments(self, caller: Caller) -> List[Payment]:
        db = get_db_session()
        try:
            require_admin(db, caller, "view all payments")
            rows = db.query(PaymentORM).order_by(PaymentORM.timestamp.desc()).all()
            return [self._payment_to_model(p) for p in rows]
        finally:
            db.close()

    def get_payment(self, caller: Caller, payment_id: str) -> Payment:
        db = get_db_session()
        try:
            require_admin(db, caller, "view payments")
            p = db.query(PaymentORM).filter(PaymentORM.id == payment_id).first()
            if not p:
                raise HTTPException(status_code=404, detail="Payment not found")
            return self._payment_to_model(p)
        finally:
            db.close()

    def add_payment(self, caller: Caller, payment: Payment) -> Payment:
        self._validate_amount(payment.amount)
        db = get_db_session()
        try:
            require_admin(db, caller, "record payments")
            payment_id = payment.id or self._new_id()
            if db.query(PaymentORM).filter(PaymentORM.id == payment_id).first():
                raise HTTPException(status_code=400, detail="Payment already exists")

            member = db.query(MemberORM).filter(MemberORM.principal == payment.member_id).first()
            row = PaymentORM(
                id=payment_id,
                member_principal=payment.member_id,
                member_email=member.email if member else None,
                amount=payment.amount,
                status=payment.status.value,
                timestamp=payment.timestamp or now_ns()
            )
            return self._save(db, row)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to record payment: {str(e)}")
        finally:
            db.close()

    def add_payment_by_email(self, caller: Caller, email: str, amount: int, status: PaymentStatus) -> Payment:
        email = (email or "").strip().lower()
        return self._add_for_member(
            caller, amount, status,
            lambda db: db.query(MemberORM).filter(MemberORM.email == email).first(),
            f"Email {email} does not belong to any member"
        )

    def add_payment_by_phone(self, caller: Caller, phone: str, amount: int, status: PaymentStatus) -> Payment:
        phone = normalize_phone(phone)

        def lookup(db):
            # Stored numbers keep whatever formatting the admin typed
            for m in db.query(MemberORM).filter(MemberORM.phone.isnot(None)).all():
                if phone and normalize_phone(m.phone) == phone:
                    return m
            return None

        return self._add_for_member(caller, amount, status, lookup, f"Phone number {phone} does not belong to any member")

    def update_payment(self, caller: Caller, payment: Payment) -> Payment:
        self._validate_amount(payment.amount)
        db = get_db_session()
        try:
            require_admin(db, caller, "update payments")
            p = db.query(PaymentORM).filter(PaymentORM.id == payment.id).first()
            if not p:
                raise HTTPException(status_code=404, detail="Payment not found")
            p.amount = payment.amount
            p.status = payment.status.value
            db.commit()
            db.refresh(p)
            return self._payment_to_model(p)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to update payment: {str(e)}")
        finally:
            db.close()

    def delete_payment(self, caller: Caller, payment_id: str) -> dict:
        db = get_db_session()
        try:
            require_admin(db, caller, "delete payments")
            p = db.query(PaymentORM).filter(PaymentORM.id == payment_id).first()
            if not p:
                raise HTTPException(status_code=404, detail="Payment not found")
            db.delete(p)
            db.commit()
            logger.info(f"PAYMENT: Deleted payment {payment_id}")
            return {"status": "success", "message": "Payment deleted"}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to delete payment: {str(e)}")
        finally:
            db.close()

    def get_member_payments(self, caller: Caller) -> List[Payment]:
        """Payments matching the caller's principal or the email of their member record."""
        db = get_db_session()
        try:
            member = find_caller_member(db, caller)
            if member is not None:
                conditions = [PaymentORM.member_principal == member.principal]
                if member.email:
                    conditions.append(PaymentORM.member_email == member.email)
                query = db.query(PaymentORM).filter(or_(*conditions))
            elif not caller.is_anonymous:
                query = db.query(PaymentORM).filter(PaymentORM.member_principal == caller.principal)
            else:
                return []
            return [self._payment_to_model(p) for p in query.order_by(PaymentORM.timestamp.desc()).all()]
        finally:
            db.close()

    # --- HELPERS ---

    def _add_for_member(self, caller: Caller, amount: int, status: PaymentStatus, lookup, not_found: str) -> Payment:
        self._validate_amount(amount)
        db = get_db_session()
        try:
            require_admin(db, caller, "record payments")
            member = lookup(db)
            if member is None:
                raise HTTPException(status_code=404, detail=not_found)
            row = PaymentORM(
                id=self._new_id(),
                member_principal=member.principal,
                member_email=member.email,
                amount=amount,
                status=status.value,
                timestamp=now_ns()
            )
            return self._save(db, row)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to record payment: {str(e)}")
        finally:
            db.close()

    def _save(self, db, row: PaymentORM) -> Payment:
        db.add(row)
        db.commit()
        db.refresh(row)
        logger.info(f"PAYMENT: Recorded {row.status} payment {row.id} of {row.amount} for {row.member_principal}")
        return self._payment_to_model(row)

    def _validate_amount(self, amount: int):
        if amount <= 0:
            raise HTTPException(status_code=400, detail="Amount must be greater than zero")

    def _new_id(self) -> str:
        return f"PAY_{uuid.uuid4().hex[:12]}"

    def _payment_to_model(self, p: PaymentORM) -> Payment:
        return Payment(
            id=p.id,
            member_id=p.member_principal,
            timestamp=p.timestamp,
            amount=p.amount,
            status=p.status
        )


# Singleton instance
payment_service = PaymentService()

def get_payment_service() -> PaymentService:
    """Dependency injection helper."""
    return payment_service
