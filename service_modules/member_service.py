"""
Member Service - gym members, their plans and email/password login.
"""
from .base import (
    HTTPException, logging,
    get_db_session, MemberORM, UserProfileORM,
    Caller, require_admin, member_to_profile, find_caller_member,
    generate_principal, now_ns, NANOS_PER_DAY
)
from .communication_service import communication_service
from auth import get_password_hash, verify_password
from models import (
    MemberProfile, MinimalMember, MembershipPlan, MembershipStatus,
    WorkoutPlan, DietPlan, RegisteredMemberInfo, AppRole,
    ManualCreateMemberRequest, ManualCreateMemberResponse,
    SerializedMemberProfile
)
from profiles import serialize_profile
from typing import List, Optional
import re

logger = logging.getLogger("gym_app")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6
DAYS_PER_MONTH = 30

# Members created from a bare name carry this until the admin assigns a plan
NO_PLAN = MembershipPlan(id="NONE", name="No plan", duration_months=0, benefits="", price=0)


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class MemberService:
    """Service for managing gym members."""

    # --- ADMIN: MEMBER RECORDS ---

    def get_all_members(self, caller: Caller) -> List[MemberProfile]:
        db = get_db_session()
        try:
            require_admin(db, caller, "view all members")
            members = db.query(MemberORM).order_by(MemberORM.id).all()
            return [member_to_profile(m) for m in members]
        finally:
            db.close()

    def get_all_minimal_members(self, caller: Caller) -> List[MinimalMember]:
        db = get_db_session()
        try:
            require_admin(db, caller, "view all members")
            rows = db.query(MemberORM.id, MemberORM.name).order_by(MemberORM.id).all()
            return [MinimalMember(id=r[0], name=r[1]) for r in rows]
        finally:
            db.close()

    def get_member(self, caller: Caller, member_id: int) -> MemberProfile:
        db = get_db_session()
        try:
            own = find_caller_member(db, caller)
            if own is None or own.id != member_id:
                require_admin(db, caller, "view other members")
            m = db.query(MemberORM).filter(MemberORM.id == member_id).first()
            if not m:
                raise HTTPException(status_code=404, detail="Member not found")
            return member_to_profile(m)
        finally:
            db.close()

    def add_member(self, caller: Caller, name: str) -> int:
        """Create a bare member record and return its id."""
        if not name.strip():
            raise HTTPException(status_code=400, detail="Member name is required")
        db = get_db_session()
        try:
            require_admin(db, caller, "add members")
            m = MemberORM(
                principal=generate_principal(),
                name=name.strip(),
                membership_status=MembershipStatus.pending.value,
                start_date=0,
                end_date=0,
                membership_plan_json=NO_PLAN.model_dump_json()
            )
            db.add(m)
            db.commit()
            db.refresh(m)
            logger.info(f"MEMBER: Added member {m.id} ({m.name})")
            return m.id
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to add member: {str(e)}")
        finally:
            db.close()

    def add_member_with_manual_credentials(self, caller: Caller, request: ManualCreateMemberRequest) -> ManualCreateMemberResponse:
        email = normalize_email(request.credentials.email)
        password = request.credentials.password

        if not request.name.strip():
            raise HTTPException(status_code=400, detail="Member name is required")
        if not EMAIL_RE.match(email):
            raise HTTPException(status_code=400, detail="Please enter a valid email address")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise HTTPException(status_code=400, detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

        db = get_db_session()
        try:
            require_admin(db, caller, "create members")
            if db.query(MemberORM).filter(MemberORM.email == email).first():
                raise HTTPException(status_code=400, detail="A member with this email already exists")

            start = now_ns()
            end = start + request.membership_plan.duration_months * DAYS_PER_MONTH * NANOS_PER_DAY

            m = MemberORM(
                principal=generate_principal(),
                name=request.name.strip(),
                email=email,
                phone=request.phone.strip(),
                hashed_password=get_password_hash(password),
                membership_status=MembershipStatus.active.value,
                start_date=start,
                end_date=end,
                membership_plan_json=request.membership_plan.model_dump_json(),
                profile_pic=request.profile_pic
            )
            db.add(m)
            db.flush()

            profile = member_to_profile(m)
            credentials = request.credentials.model_copy(update={"email": email})
            logs = communication_service.send_welcome_messages(db, profile, credentials)

            db.commit()
            logger.info(f"MEMBER: Created member {m.id} with credentials for {email}")
            return ManualCreateMemberResponse(member=profile, credentials=credentials, communication_logs=logs)
        except HTTPException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating member {email}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create member: {str(e)}")
        finally:
            db.close()

    def update_member(self, caller: Caller, member_id: int, member: MemberProfile) -> MemberProfile:
        db = get_db_session()
        try:
            require_admin(db, caller, "update members")
            m = db.query(MemberORM).filter(MemberORM.id == member_id).first()
            if not m:
                raise HTTPException(status_code=404, detail="Member not found")

            email = normalize_email(member.email) or None
            if email and email != m.email:
                clash = db.query(MemberORM).filter(MemberORM.email == email, MemberORM.id != member_id).first()
                if clash:
                    raise HTTPException(status_code=400, detail="A member with this email already exists")

            m.principal = member.principal or m.principal
            m.name = member.name
            m.email = email
            m.phone = member.phone
            m.membership_status = member.membership_status.value
            m.start_date = member.start_date
            m.end_date = member.end_date
            m.membership_plan_json = member.membership_plan.model_dump_json()
            m.workout_plan_json = member.workout_plan.model_dump_json() if member.workout_plan else None
            m.diet_plan_json = member.diet_plan.model_dump_json() if member.diet_plan else None
            m.profile_pic = member.profile_pic

            db.commit()
            db.refresh(m)
            logger.info(f"MEMBER: Updated member {member_id}")
            return member_to_profile(m)
        except HTTPException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to update member: {str(e)}")
        finally:
            db.close()

    def delete_member(self, caller: Caller, member_id: int) -> dict:
        db = get_db_session()
        try:
            require_admin(db, caller, "delete members")
            m = db.query(MemberORM).filter(MemberORM.id == member_id).first()
            if not m:
                raise HTTPException(status_code=404, detail="Member not found")
            db.delete(m)
            db.commit()
            logger.info(f"MEMBER: Deleted member {member_id}")
            return {"status": "success", "message": "Member deleted"}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to delete member: {str(e)}")
        finally:
            db.close()

    def update_member_workout_plan(self, caller: Caller, member_id: int, plan: WorkoutPlan) -> MemberProfile:
        return self._update_plan_column(caller, member_id, "workout_plan_json", plan.model_dump_json())

    def update_member_diet_plan(self, caller: Caller, member_id: int, plan: DietPlan) -> MemberProfile:
        return self._update_plan_column(caller, member_id, "diet_plan_json", plan.model_dump_json())

    def get_registered_members(self, caller: Caller) -> List[RegisteredMemberInfo]:
        """Internet Identity users who registered themselves with the Member role."""
        db = get_db_session()
        try:
            require_admin(db, caller, "view registered members")
            rows = db.query(UserProfileORM).filter(UserProfileORM.app_role == AppRole.Member.value).all()
            phones = dict(
                db.query(MemberORM.principal, MemberORM.phone)
                .filter(MemberORM.principal.in_([r.principal for r in rows]))
                .all()
            ) if rows else {}
            return [
                RegisteredMemberInfo(id=r.principal, name=r.name or "", email=r.email or "", phone=phones.get(r.principal) or "")
                for r in rows
            ]
        finally:
            db.close()

    # --- MEMBER: OWN PROFILE ---

    def get_member_profile(self, caller: Caller) -> Optional[MemberProfile]:
        db = get_db_session()
        try:
            m = find_caller_member(db, caller)
            return member_to_profile(m) if m else None
        finally:
            db.close()

    def update_member_profile(self, caller: Caller, profile: MemberProfile) -> MemberProfile:
        """Members may change their name, phone and picture. Everything else stays."""
        db = get_db_session()
        try:
            m = find_caller_member(db, caller)
            if m is None:
                raise HTTPException(status_code=404, detail="Member profile not found")
            if not profile.name.strip():
                raise HTTPException(status_code=400, detail="Member name is required")
            m.name = profile.name.strip()
            m.phone = profile.phone.strip()
            m.profile_pic = profile.profile_pic
            db.commit()
            db.refresh(m)
            return member_to_profile(m)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to update profile: {str(e)}")
        finally:
            db.close()

    # --- LOGIN ---

    def member_login(self, email: str, password: str) -> SerializedMemberProfile:
        email = normalize_email(email)
        db = get_db_session()
        try:
            m = db.query(MemberORM).filter(MemberORM.email == email).first()
            if not m or not verify_password(password, m.hashed_password):
                logger.info(f"LOGIN: Rejected member login for {email}")
                raise HTTPException(status_code=401, detail="Invalid credentials provided")
            logger.info(f"LOGIN: Member {m.id} logged in")
            return serialize_profile(member_to_profile(m))
        finally:
            db.close()

    # --- HELPERS ---

    def _update_plan_column(self, caller: Caller, member_id: int, column: str, value: str) -> MemberProfile:
        db = get_db_session()
        try:
            require_admin(db, caller, "assign plans")
            m = db.query(MemberORM).filter(MemberORM.id == member_id).first()
            if not m:
                raise HTTPException(status_code=404, detail="Member not found")
            setattr(m, column, value)
            db.commit()
            db.refresh(m)
            return member_to_profile(m)
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=str(e))
        finally:
            db.close()


# Singleton instance
member_service = MemberService()

def get_member_service() -> MemberService:
    """Dependency injection helper."""
    return member_service
