"""
User Service - Internet Identity profiles, role assignment and approvals.
"""
from .base import (
    HTTPException, logging, datetime,
    get_db_session, UserProfileORM, UserRoleORM, ApprovalORM,
    Caller, get_caller_role, require_admin
)
from models import (
    UserProfile, AppRole, UserRole, ApprovalStatus, UserApprovalInfo
)
from typing import List, Optional

logger = logging.getLogger("gym_app")


class UserService:
    """Service for identity-bound user profiles and roles."""

    # --- PROFILES ---

    def get_caller_user_profile(self, caller: Caller) -> Optional[UserProfile]:
        if caller.is_anonymous:
            return None
        db = get_db_session()
        try:
            row = db.query(UserProfileORM).filter(UserProfileORM.principal == caller.principal).first()
            return self._profile_to_model(row) if row else None
        finally:
            db.close()

    def get_user_profile(self, caller: Caller, principal: str) -> Optional[UserProfile]:
        db = get_db_session()
        try:
            if principal != caller.principal:
                require_admin(db, caller, "view other users' profiles")
            row = db.query(UserProfileORM).filter(UserProfileORM.principal == principal).first()
            return self._profile_to_model(row) if row else None
        finally:
            db.close()

    def save_caller_user_profile(self, caller: Caller, profile: UserProfile) -> None:
        """
        Save the caller's own profile.

        The first profile saved with the Admin role while no admin exists
        registers the caller as the gym admin. Anyone else asking for the
        Admin role must already hold it.
        """
        if caller.is_anonymous:
            raise HTTPException(status_code=401, detail="Anonymous callers cannot save a profile")

        db = get_db_session()
        try:
            current_role = get_caller_role(db, caller.principal)

            if profile.role == AppRole.Admin and current_role != UserRole.admin:
                if self._admin_exists(db):
                    raise HTTPException(status_code=403, detail="Unauthorized: Only admins can register admin profiles")
                self._set_role(db, caller.principal, UserRole.admin)
                logger.info(f"USER: {caller.principal} registered as gym admin")
            elif current_role == UserRole.guest:
                self._set_role(db, caller.principal, UserRole.user)

            row = db.query(UserProfileORM).filter(UserProfileORM.principal == caller.principal).first()
            if row is None:
                row = UserProfileORM(principal=caller.principal)
                db.add(row)
            row.name = profile.name
            row.email = profile.email
            row.app_role = profile.role.value
            row.profile_pic = profile.profile_pic
            row.updated_at = datetime.utcnow().isoformat()

            db.commit()
        except HTTPException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error saving profile for {caller.principal}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to save profile: {str(e)}")
        finally:
            db.close()

    # --- ROLES ---

    def get_caller_user_role(self, caller: Caller) -> UserRole:
        db = get_db_session()
        try:
            return get_caller_role(db, caller.principal)
        finally:
            db.close()

    def get_user_role(self, caller: Caller, target: str) -> UserRole:
        db = get_db_session()
        try:
            if target != caller.principal:
                require_admin(db, caller, "view other users' roles")
            return get_caller_role(db, target)
        finally:
            db.close()

    def assign_role(self, caller: Caller, user: str, role: UserRole) -> None:
        db = get_db_session()
        try:
            require_admin(db, caller, "assign roles")
            self._set_role(db, user, role)
            db.commit()
            logger.info(f"USER: {caller.principal} assigned role {role.value} to {user}")
        except HTTPException:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to assign role: {str(e)}")
        finally:
            db.close()

    def is_caller_admin(self, caller: Caller) -> bool:
        return self.get_caller_user_role(caller) == UserRole.admin

    def is_admin_registered(self) -> bool:
        db = get_db_session()
        try:
            return self._admin_exists(db)
        finally:
            db.close()

    # --- APPROVALS ---

    def request_approval(self, caller: Caller) -> None:
        if caller.is_anonymous:
            raise HTTPException(status_code=401, detail="Anonymous callers cannot request approval")
        db = get_db_session()
        try:
            row = db.query(ApprovalORM).filter(ApprovalORM.principal == caller.principal).first()
            if row is None:
                db.add(ApprovalORM(principal=caller.principal, status=ApprovalStatus.pending.value))
                db.commit()
        finally:
            db.close()

    def set_approval(self, caller: Caller, user: str, status: ApprovalStatus) -> None:
        db = get_db_session()
        try:
            require_admin(db, caller, "approve users")
            row = db.query(ApprovalORM).filter(ApprovalORM.principal == user).first()
            if row is None:
                row = ApprovalORM(principal=user)
                db.add(row)
            row.status = status.value
            row.updated_at = datetime.utcnow().isoformat()
            db.commit()
        finally:
            db.close()

    def list_approvals(self, caller: Caller) -> List[UserApprovalInfo]:
        db = get_db_session()
        try:
            require_admin(db, caller, "list approvals")
            rows = db.query(ApprovalORM).order_by(ApprovalORM.updated_at).all()
            return [UserApprovalInfo(principal=r.principal, status=r.status) for r in rows]
        finally:
            db.close()

    def is_caller_approved(self, caller: Caller) -> bool:
        db = get_db_session()
        try:
            if get_caller_role(db, caller.principal) == UserRole.admin:
                return True
            row = db.query(ApprovalORM).filter(ApprovalORM.principal == caller.principal).first()
            return row is not None and row.status == ApprovalStatus.approved.value
        finally:
            db.close()

    # --- HELPERS ---

    def _admin_exists(self, db) -> bool:
        return db.query(UserRoleORM).filter(UserRoleORM.role == UserRole.admin.value).first() is not None

    def _set_role(self, db, principal: str, role: UserRole):
        row = db.query(UserRoleORM).filter(UserRoleORM.principal == principal).first()
        if row is None:
            row = UserRoleORM(principal=principal)
            db.add(row)
        row.role = role.value
        row.assigned_at = datetime.utcnow().isoformat()

    def _profile_to_model(self, row: UserProfileORM) -> UserProfile:
        return UserProfile(
            id=row.principal,
            name=row.name or "",
            email=row.email or "",
            role=row.app_role or AppRole.Member.value,
            profile_pic=row.profile_pic,
        )


# Singleton instance
user_service = UserService()

def get_user_service() -> UserService:
    """Dependency injection helper."""
    return user_service
