"""
Notification Service - banners shown at the top of the member portal.

Notifications are not stored; they are derived from the member record and
its payments every time they are requested.
"""
from .base import (
    logging,
    get_db_session, Caller, find_caller_member, member_to_profile, now_ns, NANOS_PER_DAY
)
from .payment_service import payment_service
from .report_service import is_expired, is_expiring_soon, money_due
from models import MemberProfile, Notification, Payment, PaymentStatus
from datetime import datetime, timezone
from typing import List

logger = logging.getLogger("gym_app")

ALERT_COLOR = "#FF6347"
WARNING_COLOR = "#FFA500"


def _format_date(ns: int) -> str:
    return datetime.fromtimestamp(ns // 1_000_000_000, tz=timezone.utc).strftime("%d %b %Y")


def build_member_notifications(member: MemberProfile, payments: List[Payment], now: int) -> List[Notification]:
    notes = []
    plan = member.membership_plan.name

    if is_expired(member, now):
        notes.append(Notification(
            title="Membership Expired",
            message=f"Your {plan} membership expired on {_format_date(member.end_date)}. Renew to keep access.",
            icon="⚠️",
            color=ALERT_COLOR,
            priority=0,
            timestamp=now,
            actions=[("Renew", "/payments")]
        ))
    elif is_expiring_soon(member, now):
        days_left = max(1, -(-(member.end_date - now) // NANOS_PER_DAY))
        notes.append(Notification(
            title="Membership Expiring Soon",
            message=f"Your {plan} membership ends in {days_left} day(s), on {_format_date(member.end_date)}.",
            icon="⏰",
            color=WARNING_COLOR,
            priority=2,
            timestamp=now,
            actions=[("Renew", "/payments")]
        ))

    due = money_due(member, payments)
    if due > 0:
        notes.append(Notification(
            title="Payment Due",
            message=f"You have ₹{due} due for your {plan} membership.",
            icon="💰",
            color=ALERT_COLOR,
            priority=1,
            timestamp=now,
            actions=[("Pay Now", "/payments")]
        ))

    pending = [p for p in payments if p.status == PaymentStatus.pending]
    if pending:
        notes.append(Notification(
            title="Payment Pending",
            message=f"{len(pending)} payment(s) totalling ₹{sum(p.amount for p in pending)} are awaiting confirmation.",
            icon="💰",
            color=WARNING_COLOR,
            priority=3,
            timestamp=now,
            actions=[]
        ))

    return sorted(notes, key=lambda n: n.priority)


class NotificationService:

    def get_member_notifications(self, caller: Caller) -> List[Notification]:
        db = get_db_session()
        try:
            member = find_caller_member(db, caller)
            if member is None:
                return []
            profile = member_to_profile(member)
        finally:
            db.close()

        payments = payment_service.get_member_payments(caller)
        return build_member_notifications(profile, payments, now_ns())


# Singleton instance
notification_service = NotificationService()

def get_notification_service() -> NotificationService:
    """Dependency injection helper."""
    return notification_service
