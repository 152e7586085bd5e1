"""
GymQueries - cached queries and invalidating mutations over GymBackend.

Every read the dashboards make goes through fetch() under a fixed key.
Every write calls the backend and then drops the keys whose data it
changed, so the next read reloads from the backend.
"""
import logging
from typing import List, Optional

from member_session import MemberSession
from models import (
    UserProfile, UserRole, MemberProfile, MembershipPlan, WorkoutPlan, DietPlan,
    ManualCreateMemberRequest, Payment, PaymentStatus, Expense, ClassBooking
)
from profiles import LocalProfile, RemoteProfile, normalize_profile
from query_cache import QueryCache
from .gym_backend import GymBackend

logger = logging.getLogger("gym_app")

CURRENT_USER_PROFILE = "currentUserProfile"
USER_ROLE = "userRole"
MEMBERS = "members"
REPORTS = "reports"
MEMBER_PROFILE = "memberProfile"
AUTHENTICATED_MEMBER = "authenticatedMember"
MEMBER_PROFILE_BY_ID = "memberProfileById"
MEMBERSHIP_PLANS = "membershipPlans"
PAYMENTS = "payments"
MEMBER_PAYMENTS = "memberPayments"
MEMBER_NOTIFICATIONS = "memberNotifications"
EXPENSES = "expenses"
MEMBER_CLASS_BOOKINGS = "memberClassBookings"
MEMBER_ATTENDANCE = "memberAttendance"
MY_QR_CODE = "myQrCode"
REGISTERED_MEMBERS = "registeredMembers"


class GymQueries:
    def __init__(self, backend: GymBackend, cache: QueryCache, session: MemberSession):
        self.backend = backend
        self.cache = cache
        self.session = session

    def _invalidate(self, *keys):
        for key in keys:
            self.cache.invalidate(key)

    @property
    def serves_session_member(self) -> bool:
        """True when the backend acts for the email member, not an identity."""
        return self.backend.caller.member_id is not None

    # --- Queries ---

    def get_caller_user_profile(self) -> Optional[UserProfile]:
        return self.cache.fetch(CURRENT_USER_PROFILE, self.backend.get_caller_user_profile)

    def get_caller_user_role(self) -> UserRole:
        return self.cache.fetch(USER_ROLE, self.backend.get_caller_user_role)

    def get_all_members(self) -> List[MemberProfile]:
        return self.cache.fetch(MEMBERS, self.backend.get_all_members)

    def get_member_by_id(self, member_id: int) -> MemberProfile:
        return self.cache.fetch(
            (MEMBER_PROFILE_BY_ID, str(member_id)),
            lambda: self.backend.get_member(member_id)
        )

    def get_reports(self):
        return self.cache.fetch(REPORTS, self.backend.get_reports)

    def get_member_profile(self) -> Optional[MemberProfile]:
        if self.serves_session_member:
            if AUTHENTICATED_MEMBER in self.cache:
                return self.cache.get(AUTHENTICATED_MEMBER)
            cached = self.session.cached_profile()
            if cached is not None:
                self.cache.set(AUTHENTICATED_MEMBER, cached)
            return cached

        def load():
            profile = self.backend.get_member_profile()
            return normalize_profile(RemoteProfile(profile)) if profile else None
        return self.cache.fetch(MEMBER_PROFILE, load)

    def get_all_membership_plans(self) -> List[MembershipPlan]:
        return self.cache.fetch(MEMBERSHIP_PLANS, self.backend.get_all_membership_plans)

    def get_all_payments(self) -> List[Payment]:
        return self.cache.fetch(PAYMENTS, self.backend.get_all_payments)

    def get_member_payments(self) -> List[Payment]:
        return self.cache.fetch(MEMBER_PAYMENTS, self.backend.get_member_payments)

    def get_member_notifications(self):
        return self.cache.fetch(MEMBER_NOTIFICATIONS, self.backend.get_member_notifications)

    def get_all_expenses(self) -> List[Expense]:
        return self.cache.fetch(EXPENSES, self.backend.get_all_expenses)

    def get_member_class_bookings(self) -> List[ClassBooking]:
        return self.cache.fetch(MEMBER_CLASS_BOOKINGS, self.backend.get_member_class_bookings)

    def get_member_attendance(self):
        return self.cache.fetch(MEMBER_ATTENDANCE, self.backend.get_member_attendance)

    def get_my_qr_code(self) -> Optional[str]:
        return self.cache.fetch(MY_QR_CODE, self.backend.get_my_qr_code)

    def get_registered_members(self):
        return self.cache.fetch(REGISTERED_MEMBERS, self.backend.get_registered_members)

    # --- Identity & roles ---

    def save_caller_user_profile(self, profile: UserProfile):
        result = self.backend.save_caller_user_profile(profile)
        self._invalidate(CURRENT_USER_PROFILE)
        return result

    def assign_role(self, user: str, role: UserRole):
        result = self.backend.assign_role(user, role)
        self._invalidate(USER_ROLE)
        return result

    def member_login(self, email: str, password: str) -> MemberProfile:
        serialized = self.backend.member_login(email, password)
        profile = normalize_profile(LocalProfile(serialized))
        # Nothing cached for the previous login may be served to this member
        self.cache.clear()
        self.cache.set(AUTHENTICATED_MEMBER, profile)
        self.cache.set(MEMBER_PROFILE, profile)
        self.cache.set((MEMBER_PROFILE_BY_ID, str(profile.id)), profile)
        self.session.create(profile)
        logger.info(f"AUTH: Member {profile.id} logged in")
        return profile

    # --- Members ---

    def add_member_with_manual_credentials(self, request: ManualCreateMemberRequest):
        result = self.backend.add_member_with_manual_credentials(request)
        self._invalidate(MEMBERS, REPORTS)
        return result

    def add_member(self, name: str) -> int:
        member_id = self.backend.add_member(name)
        self._invalidate(MEMBERS, REPORTS)
        return member_id

    def delete_member(self, member_id: int):
        result = self.backend.delete_member(member_id)
        self._invalidate(MEMBERS, REPORTS, (MEMBER_PROFILE_BY_ID, str(member_id)))
        return result

    def update_member(self, member_id: int, member: MemberProfile):
        result = self.backend.update_member(member_id, member)
        self._invalidate(
            MEMBERS, MEMBER_PROFILE, AUTHENTICATED_MEMBER, REPORTS,
            (MEMBER_PROFILE_BY_ID, str(member_id))
        )
        return result

    def update_member_workout_plan(self, member_id: int, plan: WorkoutPlan):
        result = self.backend.update_member_workout_plan(member_id, plan)
        self._invalidate(MEMBERS, MEMBER_PROFILE, AUTHENTICATED_MEMBER)
        return result

    def update_member_diet_plan(self, member_id: int, plan: DietPlan):
        result = self.backend.update_member_diet_plan(member_id, plan)
        self._invalidate(MEMBERS, MEMBER_PROFILE, AUTHENTICATED_MEMBER)
        return result

    def update_member_profile(self, profile: MemberProfile) -> MemberProfile:
        updated = self.backend.update_member_profile(profile)
        self._invalidate(MEMBER_PROFILE, AUTHENTICATED_MEMBER, MEMBERS)
        # Email members read their profile from the session, not the backend
        if self.serves_session_member and self.session.update_profile(updated):
            self.cache.set(AUTHENTICATED_MEMBER, updated)
        return updated

    # --- Membership plans ---

    def add_membership_plan(self, plan: MembershipPlan):
        result = self.backend.add_membership_plan(plan)
        self._invalidate(MEMBERSHIP_PLANS)
        return result

    def update_membership_plan(self, plan: MembershipPlan):
        result = self.backend.update_membership_plan(plan)
        self._invalidate(MEMBERSHIP_PLANS)
        return result

    def delete_membership_plan(self, plan_id: str):
        result = self.backend.delete_membership_plan(plan_id)
        self._invalidate(MEMBERSHIP_PLANS)
        return result

    # --- Payments ---

    def _payments_added(self):
        self._invalidate(PAYMENTS, MEMBER_PAYMENTS, REPORTS, MEMBER_NOTIFICATIONS)

    def add_payment(self, payment: Payment):
        result = self.backend.add_payment(payment)
        self._payments_added()
        return result

    def add_payment_by_email(self, email: str, amount: int, status: PaymentStatus):
        result = self.backend.add_payment_by_email(email, amount, status)
        self._payments_added()
        return result

    def add_payment_by_phone(self, phone: str, amount: int, status: PaymentStatus):
        result = self.backend.add_payment_by_phone(phone, amount, status)
        self._payments_added()
        return result

    def add_payment_by_identifier(self, identifier: str, amount: int, status: PaymentStatus):
        identifier = identifier.strip()
        if "@" in identifier:
            return self.add_payment_by_email(identifier, amount, status)
        return self.add_payment_by_phone(identifier, amount, status)

    def update_payment(self, payment: Payment):
        result = self.backend.update_payment(payment)
        self._invalidate(PAYMENTS, MEMBER_PAYMENTS, REPORTS)
        return result

    def delete_payment(self, payment_id: str):
        result = self.backend.delete_payment(payment_id)
        self._invalidate(PAYMENTS, MEMBER_PAYMENTS, REPORTS)
        return result

    # --- Expenses ---

    def add_expense(self, expense: Expense):
        result = self.backend.add_expense(expense)
        self._invalidate(EXPENSES, REPORTS)
        return result

    def delete_expense(self, expense_id: str):
        result = self.backend.delete_expense(expense_id)
        self._invalidate(EXPENSES, REPORTS)
        return result

    # --- Class bookings & attendance ---

    def add_class_booking(self, booking: ClassBooking):
        result = self.backend.add_class_booking(booking)
        self._invalidate(MEMBER_CLASS_BOOKINGS)
        return result

    def update_class_booking(self, booking_id: str, booking: ClassBooking):
        result = self.backend.update_class_booking(booking_id, booking)
        self._invalidate(MEMBER_CLASS_BOOKINGS)
        return result

    def check_in(self):
        record = self.backend.check_in()
        self._invalidate(MEMBER_ATTENDANCE)
        return record

    def check_out(self):
        record = self.backend.check_out()
        self._invalidate(MEMBER_ATTENDANCE)
        return record
