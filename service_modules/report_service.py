"""
Report Service - financial summary and membership health for the admin dashboard.
"""
from .base import (
    logging,
    get_db_session, MemberORM, PaymentORM, ExpenseORM,
    Caller, require_admin, member_to_profile, now_ns, NANOS_PER_DAY
)
from models import MemberProfile, Payment, PaymentStatus, ReportMember, ReportSummary
from typing import Iterable, List, Optional

logger = logging.getLogger("gym_app")

EXPIRING_SOON_DAYS = 7
REVENUE_WINDOW_DAYS = 30


def is_expired(member: MemberProfile, now: int) -> bool:
    return 0 < member.end_date < now


def is_expiring_soon(member: MemberProfile, now: int) -> bool:
    if member.end_date <= 0 or is_expired(member, now):
        return False
    return member.end_date - now <= EXPIRING_SOON_DAYS * NANOS_PER_DAY


def payments_for_member(member: MemberProfile, payments: Iterable[Payment], emails: Optional[dict] = None) -> List[Payment]:
    """
    Payments filed under the member's principal, or (through `emails`,
    payment id -> member email) under the member's email address.
    """
    emails = emails or {}
    own = []
    for p in payments:
        if p.member_id == member.principal:
            own.append(p)
        elif member.email and emails.get(p.id) == member.email:
            own.append(p)
    return own


def money_due(member: MemberProfile, member_payments: Iterable[Payment]) -> int:
    """Plan price minus what was paid since the membership started. Never negative."""
    price = member.membership_plan.price
    if price <= 0:
        return 0
    paid = sum(
        p.amount for p in member_payments
        if p.status == PaymentStatus.paid and p.timestamp >= member.start_date
    )
    return max(0, price - paid)


def build_report(
    members: List[MemberProfile],
    payments: List[Payment],
    expense_amounts: List[int],
    now: int,
    payment_emails: Optional[dict] = None
) -> ReportSummary:
    paid = [p for p in payments if p.status == PaymentStatus.paid]
    total_payments = sum(p.amount for p in paid)
    total_expenses = sum(expense_amounts)
    window_start = now - REVENUE_WINDOW_DAYS * NANOS_PER_DAY
    monthly_revenue = sum(p.amount for p in paid if p.timestamp >= window_start)

    report_members = []
    for m in members:
        own = payments_for_member(m, payments, payment_emails)
        report_members.append(ReportMember(
            member=m,
            is_expired=is_expired(m, now),
            is_expiring_soon=is_expiring_soon(m, now),
            money_due=money_due(m, own)
        ))

    return ReportSummary(
        members=report_members,
        total_payments=total_payments,
        total_expenses=total_expenses,
        profit=total_payments - total_expenses,
        monthly_revenue=monthly_revenue
    )


class ReportService:

    def get_reports(self, caller: Caller) -> ReportSummary:
        db = get_db_session()
        try:
            require_admin(db, caller, "view reports")
            members = [member_to_profile(m) for m in db.query(MemberORM).order_by(MemberORM.id).all()]
            payment_rows = db.query(PaymentORM).all()
            payments = [
                Payment(id=p.id, member_id=p.member_principal, timestamp=p.timestamp, amount=p.amount, status=p.status)
                for p in payment_rows
            ]
            emails = {p.id: p.member_email for p in payment_rows if p.member_email}
            expenses = [e[0] for e in db.query(ExpenseORM.amount).all()]
            return build_report(members, payments, expenses, now_ns(), emails)
        finally:
            db.close()


# Singleton instance
report_service = ReportService()

def get_report_service() -> ReportService:
    """Dependency injection helper."""
    return report_service
