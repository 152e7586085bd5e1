"""
GymBackend - the RPC surface the dashboards talk to.

One instance per caller. Each method is a typed call onto the service
modules; the presentation layer never touches the services directly.
"""
from .base import Caller, logging
from .user_service import user_service
from .member_service import member_service
from .plan_service import plan_service
from .payment_service import payment_service
from .expense_service import expense_service
from .attendance_service import attendance_service
from .booking_service import booking_service
from .qr_service import qr_service
from .report_service import report_service
from .notification_service import notification_service
from .communication_service import communication_service
from .stripe_service import stripe_service
from database import ping_db
from models import (
    UserProfile, UserRole, ApprovalStatus, MemberProfile, MembershipPlan,
    WorkoutPlan, DietPlan, ManualCreateMemberRequest, Payment, PaymentStatus,
    Expense, AttendanceRecord, MembershipStatus, ClassBooking, BookingStatus,
    CommunicationChannel, CommunicationStatus, ShoppingItem, StripeConfiguration
)
from sqlalchemy.exc import SQLAlchemyError
from typing import List

logger = logging.getLogger("gym_app")


class GymBackend:
    def __init__(self, caller: Caller):
        self.caller = caller

    def ping(self) -> bool:
        try:
            return ping_db()
        except SQLAlchemyError as e:
            logger.error(f"BACKEND: Database unavailable: {e}")
            return False

    # --- Profiles & roles ---
    def get_caller_user_profile(self):
        return user_service.get_caller_user_profile(self.caller)

    def save_caller_user_profile(self, profile: UserProfile):
        return user_service.save_caller_user_profile(self.caller, profile)

    def get_user_profile(self, principal: str):
        return user_service.get_user_profile(self.caller, principal)

    def get_caller_user_role(self) -> UserRole:
        return user_service.get_caller_user_role(self.caller)

    def get_user_role(self, target: str) -> UserRole:
        return user_service.get_user_role(self.caller, target)

    def assign_role(self, user: str, role: UserRole):
        return user_service.assign_role(self.caller, user, role)

    def assign_caller_user_role(self, user: str, role: UserRole):
        return user_service.assign_role(self.caller, user, role)

    def is_caller_admin(self) -> bool:
        return user_service.is_caller_admin(self.caller)

    def is_admin_registered(self) -> bool:
        return user_service.is_admin_registered()

    # --- Approvals ---
    def request_approval(self):
        return user_service.request_approval(self.caller)

    def set_approval(self, user: str, status: ApprovalStatus):
        return user_service.set_approval(self.caller, user, status)

    def list_approvals(self):
        return user_service.list_approvals(self.caller)

    def is_caller_approved(self) -> bool:
        return user_service.is_caller_approved(self.caller)

    # --- Members ---
    def get_all_members(self) -> List[MemberProfile]:
        return member_service.get_all_members(self.caller)

    def get_all_minimal_members(self):
        return member_service.get_all_minimal_members(self.caller)

    def get_member(self, member_id: int) -> MemberProfile:
        return member_service.get_member(self.caller, member_id)

    def add_member(self, name: str) -> int:
        return member_service.add_member(self.caller, name)

    def add_member_with_manual_credentials(self, request: ManualCreateMemberRequest):
        return member_service.add_member_with_manual_credentials(self.caller, request)

    def update_member(self, member_id: int, member: MemberProfile):
        return member_service.update_member(self.caller, member_id, member)

    def delete_member(self, member_id: int):
        return member_service.delete_member(self.caller, member_id)

    def update_member_workout_plan(self, member_id: int, plan: WorkoutPlan):
        return member_service.update_member_workout_plan(self.caller, member_id, plan)

    def update_member_diet_plan(self, member_id: int, plan: DietPlan):
        return member_service.update_member_diet_plan(self.caller, member_id, plan)

    def get_member_profile(self):
        return member_service.get_member_profile(self.caller)

    def update_member_profile(self, profile: MemberProfile):
        return member_service.update_member_profile(self.caller, profile)

    def get_registered_members(self):
        return member_service.get_registered_members(self.caller)

    def member_login(self, email: str, password: str):
        return member_service.member_login(email, password)

    # --- Membership plans ---
    def get_all_membership_plans(self) -> List[MembershipPlan]:
        return plan_service.get_all_membership_plans()

    def get_membership_plan(self, plan_id: str) -> MembershipPlan:
        return plan_service.get_membership_plan(plan_id)

    def add_membership_plan(self, plan: MembershipPlan):
        return plan_service.add_membership_plan(self.caller, plan)

    def update_membership_plan(self, plan: MembershipPlan):
        return plan_service.update_membership_plan(self.caller, plan)

    def delete_membership_plan(self, plan_id: str):
        return plan_service.delete_membership_plan(self.caller, plan_id)

    # --- Payments ---
    def get_all_payments(self) -> List[Payment]:
        return payment_service.get_all_payments(self.caller)

    def get_payment(self, payment_id: str) -> Payment:
        return payment_service.get_payment(self.caller, payment_id)

    def add_payment(self, payment: Payment):
        return payment_service.add_payment(self.caller, payment)

    def add_payment_by_email(self, email: str, amount: int, status: PaymentStatus):
        return payment_service.add_payment_by_email(self.caller, email, amount, status)

    def add_payment_by_phone(self, phone: str, amount: int, status: PaymentStatus):
        return payment_service.add_payment_by_phone(self.caller, phone, amount, status)

    def update_payment(self, payment: Payment):
        return payment_service.update_payment(self.caller, payment)

    def delete_payment(self, payment_id: str):
        return payment_service.delete_payment(self.caller, payment_id)

    def get_member_payments(self) -> List[Payment]:
        return payment_service.get_member_payments(self.caller)

    # --- Expenses ---
    def get_all_expenses(self) -> List[Expense]:
        return expense_service.get_all_expenses(self.caller)

    def add_expense(self, expense: Expense):
        return expense_service.add_expense(self.caller, expense)

    def delete_expense(self, expense_id: str):
        return expense_service.delete_expense(self.caller, expense_id)

    # --- Attendance ---
    def add_attendance(self, record: AttendanceRecord):
        return attendance_service.add_attendance(self.caller, record)

    def check_in(self) -> AttendanceRecord:
        return attendance_service.check_in(self.caller)

    def check_in_member(self, member_id: int) -> AttendanceRecord:
        return attendance_service.check_in_member(self.caller, member_id)

    def check_out(self) -> AttendanceRecord:
        return attendance_service.check_out(self.caller)

    def get_member_attendance(self) -> List[AttendanceRecord]:
        return attendance_service.get_member_attendance(self.caller)

    def get_attendance_by_member(self, principal: str):
        return attendance_service.get_attendance_by_member(self.caller, principal)

    def get_attendance_by_member_status(self, status: MembershipStatus):
        return attendance_service.get_attendance_by_member_status(self.caller, status)

    # --- Class bookings ---
    def add_class_booking(self, booking: ClassBooking):
        return booking_service.add_class_booking(self.caller, booking)

    def update_class_booking(self, booking_id: str, booking: ClassBooking):
        return booking_service.update_class_booking(self.caller, booking_id, booking)

    def get_member_class_bookings(self) -> List[ClassBooking]:
        return booking_service.get_member_class_bookings(self.caller)

    def get_class_bookings_by_status(self, status: BookingStatus):
        return booking_service.get_class_bookings_by_status(self.caller, status)

    # --- QR codes ---
    def generate_qr_code(self, member_id: int) -> str:
        return qr_service.generate_qr_code(self.caller, member_id)

    def get_my_qr_code(self):
        return qr_service.get_my_qr_code(self.caller)

    def validate_qr_code(self, qr: str) -> int:
        return qr_service.validate_qr_code(self.caller, qr)

    # --- Reports & notifications ---
    def get_reports(self):
        return report_service.get_reports(self.caller)

    def get_member_notifications(self):
        return notification_service.get_member_notifications(self.caller)

    # --- Communication log ---
    def log_communication(self, to: str, channel: CommunicationChannel, content: str, status: CommunicationStatus):
        return communication_service.log_communication(self.caller, to, channel, content, status)

    def get_all_communication_logs(self):
        return communication_service.get_all_communication_logs(self.caller)

    def get_communication_logs_by_email(self, email: str):
        return communication_service.get_communication_logs_by_email(self.caller, email)

    # --- Stripe ---
    def is_stripe_configured(self) -> bool:
        return stripe_service.is_stripe_configured()

    def set_stripe_configuration(self, config: StripeConfiguration):
        return stripe_service.set_stripe_configuration(self.caller, config)

    def create_checkout_session(self, items: List[ShoppingItem], success_url: str, cancel_url: str) -> str:
        return stripe_service.create_checkout_session(self.caller, items, success_url, cancel_url)

    def get_stripe_session_status(self, session_id: str):
        return stripe_service.get_stripe_session_status(session_id)
