"""
Attendance Service - gym check-ins and check-outs.
"""
from .base import (
    HTTPException, logging,
    get_db_session, AttendanceORM, MemberORM,
    Caller, require_admin, find_caller_member, now_ns
)
from models import AttendanceRecord, MembershipStatus
from typing import List, Optional

logger = logging.getLogger("gym_app")


def caller_member_principal(db, caller: Caller) -> Optional[str]:
    """Principal that activity records are filed under for this caller."""
    member = find_caller_member(db, caller)
    if member is not None:
        return member.principal
    if caller.is_anonymous:
        return None
    return caller.principal


class AttendanceService:
    """Service for member attendance."""

    def check_in(self, caller: Caller) -> AttendanceRecord:
        db = get_db_session()
        try:
            principal = caller_member_principal(db, caller)
            if principal is None:
                raise HTTPException(status_code=401, detail="Not authenticated")
            return self._check_in(db, principal)
        finally:
            db.close()

    def check_in_member(self, caller: Caller, member_id: int) -> AttendanceRecord:
        """Front-desk check-in, e.g. after scanning the member's QR code."""
        db = get_db_session()
        try:
            require_admin(db, caller, "check members in")
            member = db.query(MemberORM).filter(MemberORM.id == member_id).first()
            if not member:
                raise HTTPException(status_code=404, detail="Member not found")
            return self._check_in(db, member.principal)
        finally:
            db.close()

    def check_out(self, caller: Caller) -> AttendanceRecord:
        db = get_db_session()
        try:
            principal = caller_member_principal(db, caller)
            if principal is None:
                raise HTTPException(status_code=401, detail="Not authenticated")
            record = self._open_record(db, principal)
            if record is None:
                raise HTTPException(status_code=400, detail="No active check-in found")
            record.check_out_time = max(now_ns(), record.check_in_time)
            db.commit()
            db.refresh(record)
            logger.info(f"ATTENDANCE: {principal} checked out")
            return self._record_to_model(record)
        finally:
            db.close()

    def add_attendance(self, caller: Caller, record: AttendanceRecord) -> AttendanceRecord:
        if record.check_out_time is not None and record.check_out_time < record.check_in_time:
            raise HTTPException(status_code=400, detail="Check-out cannot be before check-in")
        db = get_db_session()
        try:
            require_admin(db, caller, "record attendance")
            row = AttendanceORM(
                member_principal=record.member_id,
                check_in_time=record.check_in_time,
                check_out_time=record.check_out_time
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return self._record_to_model(row)
        finally:
            db.close()

    def get_member_attendance(self, caller: Caller) -> List[AttendanceRecord]:
        db = get_db_session()
        try:
            principal = caller_member_principal(db, caller)
            if principal is None:
                return []
            return self._records_for(db, [principal])
        finally:
            db.close()

    def get_attendance_by_member(self, caller: Caller, principal: str) -> List[AttendanceRecord]:
        db = get_db_session()
        try:
            require_admin(db, caller, "view attendance")
            return self._records_for(db, [principal])
        finally:
            db.close()

    def get_attendance_by_member_status(self, caller: Caller, status: MembershipStatus) -> List[AttendanceRecord]:
        db = get_db_session()
        try:
            require_admin(db, caller, "view attendance")
            principals = [
                r[0] for r in db.query(MemberORM.principal)
                .filter(MemberORM.membership_status == status.value).all()
            ]
            return self._records_for(db, principals) if principals else []
        finally:
            db.close()

    # --- HELPERS ---

    def _check_in(self, db, principal: str) -> AttendanceRecord:
        if self._open_record(db, principal) is not None:
            raise HTTPException(status_code=400, detail="Already checked in")
        row = AttendanceORM(member_principal=principal, check_in_time=now_ns())
        db.add(row)
        db.commit()
        db.refresh(row)
        logger.info(f"ATTENDANCE: {principal} checked in")
        return self._record_to_model(row)

    def _open_record(self, db, principal: str) -> Optional[AttendanceORM]:
        return db.query(AttendanceORM).filter(
            AttendanceORM.member_principal == principal,
            AttendanceORM.check_out_time.is_(None)
        ).order_by(AttendanceORM.check_in_time.desc()).first()

    def _records_for(self, db, principals: List[str]) -> List[AttendanceRecord]:
        rows = db.query(AttendanceORM).filter(
            AttendanceORM.member_principal.in_(principals)
        ).order_by(AttendanceORM.check_in_time.desc()).all()
        return [self._record_to_model(r) for r in rows]

    def _record_to_model(self, r: AttendanceORM) -> AttendanceRecord:
        return AttendanceRecord(
            member_id=r.member_principal,
            check_in_time=r.check_in_time,
            check_out_time=r.check_out_time
        )


# Singleton instance
attendance_service = AttendanceService()

def get_attendance_service() -> AttendanceService:
    """Dependency injection helper."""
    return attendance_service
