"""
Booking Service - group class bookings (yoga, crossfit, zumba, pilates).
"""
from .base import (
    HTTPException, logging,
    get_db_session, ClassBookingORM,
    Caller, require_admin, get_caller_role, uuid
)
from .attendance_service import caller_member_principal
from models import ClassBooking, BookingStatus, UserRole
from typing import List

logger = logging.getLogger("gym_app")


class BookingService:
    """Service for class bookings."""

    def add_class_booking(self, caller: Caller, booking: ClassBooking) -> ClassBooking:
        """Book a class for the caller. The booking is always filed under the caller."""
        if booking.date <= 0:
            raise HTTPException(status_code=400, detail="A class date is required")
        db = get_db_session()
        try:
            principal = caller_member_principal(db, caller)
            if principal is None:
                raise HTTPException(status_code=401, detail="Not authenticated")

            booking_id = booking.id or f"BOOK_{uuid.uuid4().hex[:12]}"
            if db.query(ClassBookingORM).filter(ClassBookingORM.id == booking_id).first():
                raise HTTPException(status_code=400, detail="Booking already exists")

            row = ClassBookingORM(
                id=booking_id,
                member_principal=principal,
                class_type=booking.class_type.value,
                date=booking.date,
                status=BookingStatus.booked.value
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            logger.info(f"BOOKING: {principal} booked {row.class_type} ({row.id})")
            return self._booking_to_model(row)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to book class: {str(e)}")
        finally:
            db.close()

    def update_class_booking(self, caller: Caller, booking_id: str, booking: ClassBooking) -> ClassBooking:
        db = get_db_session()
        try:
            row = db.query(ClassBookingORM).filter(ClassBookingORM.id == booking_id).first()
            if not row:
                raise HTTPException(status_code=404, detail="Booking not found")

            is_owner = caller_member_principal(db, caller) == row.member_principal
            if not is_owner and get_caller_role(db, caller.principal) != UserRole.admin:
                raise HTTPException(status_code=403, detail="Unauthorized: Only the member or an admin can change this booking")

            row.class_type = booking.class_type.value
            row.date = booking.date
            row.status = booking.status.value
            db.commit()
            db.refresh(row)
            return self._booking_to_model(row)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to update booking: {str(e)}")
        finally:
            db.close()

    def get_member_class_bookings(self, caller: Caller) -> List[ClassBooking]:
        db = get_db_session()
        try:
            principal = caller_member_principal(db, caller)
            if principal is None:
                return []
            rows = db.query(ClassBookingORM).filter(
                ClassBookingORM.member_principal == principal
            ).order_by(ClassBookingORM.date).all()
            return [self._booking_to_model(r) for r in rows]
        finally:
            db.close()

    def get_class_bookings_by_status(self, caller: Caller, status: BookingStatus) -> List[ClassBooking]:
        db = get_db_session()
        try:
            require_admin(db, caller, "view class bookings")
            rows = db.query(ClassBookingORM).filter(
                ClassBookingORM.status == status.value
            ).order_by(ClassBookingORM.date).all()
            return [self._booking_to_model(r) for r in rows]
        finally:
            db.close()

    def _booking_to_model(self, r: ClassBookingORM) -> ClassBooking:
        return ClassBooking(
            id=r.id,
            member_id=r.member_principal,
            class_type=r.class_type,
            date=r.date,
            status=r.status
        )


# Singleton instance
booking_service = BookingService()

def get_booking_service() -> BookingService:
    """Dependency injection helper."""
    return booking_service
