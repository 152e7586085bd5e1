from models import MemberProfile, MembershipPlan, MembershipStatus, Payment, PaymentStatus
from service_modules.base import NANOS_PER_DAY
from service_modules.notification_service import build_member_notifications
from service_modules.report_service import build_report, is_expired, is_expiring_soon, money_due

NOW = 1_700_000_000_000_000_000
PLAN = MembershipPlan(id="P1", name="Monthly", duration_months=1, benefits="", price=1500)


def member(end_offset_days, start_offset_days=-20, principal="p-1", email="a@b.com") -> MemberProfile:
    return MemberProfile(
        id=1, principal=principal, name="Asha", email=email, phone="",
        membership_status=MembershipStatus.active,
        start_date=NOW + start_offset_days * NANOS_PER_DAY,
        end_date=NOW + end_offset_days * NANOS_PER_DAY,
        membership_plan=PLAN
    )


def payment(amount, status=PaymentStatus.paid, days_ago=1, principal="p-1", pid="PAY_1") -> Payment:
    return Payment(id=pid, member_id=principal, timestamp=NOW - days_ago * NANOS_PER_DAY, amount=amount, status=status)


def test_expiry_flags():
    assert is_expired(member(-1), NOW)
    assert not is_expiring_soon(member(-1), NOW)
    assert is_expiring_soon(member(3), NOW)
    assert not is_expiring_soon(member(30), NOW)


def test_money_due_never_negative():
    assert money_due(member(10), []) == 1500
    assert money_due(member(10), [payment(1000)]) == 500
    assert money_due(member(10), [payment(2000)]) == 0
    # Payments made before the membership started do not count
    assert money_due(member(10), [payment(1500, days_ago=40)]) == 1500
    assert money_due(member(10), [payment(1500, status=PaymentStatus.pending)]) == 1500


def test_build_report_totals():
    payments = [
        payment(1500, pid="PAY_1"),
        payment(800, days_ago=45, pid="PAY_2"),
        payment(300, status=PaymentStatus.failed, pid="PAY_3"),
    ]
    report = build_report([member(3)], payments, [1000, 200], NOW)

    assert report.total_payments == 2300
    assert report.total_expenses == 1200
    assert report.profit == 1100
    assert report.monthly_revenue == 1500
    assert report.members[0].is_expiring_soon
    assert report.members[0].money_due == 0


def test_report_matches_payments_by_email():
    m = member(10, principal="p-1")
    p = payment(1500, principal="other-principal", pid="PAY_9")
    report = build_report([m], [p], [], NOW, {"PAY_9": "a@b.com"})
    assert report.members[0].money_due == 0


def test_notifications_sorted_by_priority():
    notes = build_member_notifications(member(3), [payment(200, status=PaymentStatus.pending)], NOW)
    titles = [n.title for n in notes]
    assert titles == ["Payment Due", "Membership Expiring Soon", "Payment Pending"]
    assert [n.priority for n in notes] == sorted(n.priority for n in notes)


def test_expired_notification_comes_first():
    notes = build_member_notifications(member(-2), [], NOW)
    assert notes[0].title == "Membership Expired"
    assert notes[0].actions == [("Renew", "/payments")]


def test_no_notifications_for_paid_up_member():
    assert build_member_notifications(member(20), [payment(1500)], NOW) == []
