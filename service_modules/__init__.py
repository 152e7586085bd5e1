"""
Services package - organized service modules.

Each module owns one slice of the gym backend and exposes a singleton plus
a get_xxx_service() helper for FastAPI dependency injection. GymBackend
binds them to a caller; GymQueries adds the dashboard cache on top.
"""
from .base import *
from .user_service import UserService, user_service, get_user_service
from .member_service import MemberService, member_service, get_member_service
from .plan_service import PlanService, plan_service, get_plan_service
from .payment_service import PaymentService, payment_service, get_payment_service
from .expense_service import ExpenseService, expense_service, get_expense_service
from .attendance_service import AttendanceService, attendance_service, get_attendance_service
from .booking_service import BookingService, booking_service, get_booking_service
from .qr_service import QrService, qr_service, get_qr_service
from .report_service import ReportService, report_service, get_report_service
from .notification_service import NotificationService, notification_service, get_notification_service
from .communication_service import CommunicationService, communication_service, get_communication_service
from .stripe_service import StripeService, stripe_service, get_stripe_service
from .gym_backend import GymBackend
from .gym_queries import GymQueries

__all__ = [
    'UserService', 'user_service', 'get_user_service',
    'MemberService', 'member_service', 'get_member_service',
    'PlanService', 'plan_service', 'get_plan_service',
    'PaymentService', 'payment_service', 'get_payment_service',
    'ExpenseService', 'expense_service', 'get_expense_service',
    'AttendanceService', 'attendance_service', 'get_attendance_service',
    'BookingService', 'booking_service', 'get_booking_service',
    'QrService', 'qr_service', 'get_qr_service',
    'ReportService', 'report_service', 'get_report_service',
    'NotificationService', 'notification_service', 'get_notification_service',
    'CommunicationService', 'communication_service', 'get_communication_service',
    'StripeService', 'stripe_service', 'get_stripe_service',
    'GymBackend', 'GymQueries',
]
