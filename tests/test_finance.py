import pytest
from fastapi import HTTPException

from models import Expense, ExpenseType, Payment, PaymentStatus
from service_modules.base import Caller
from service_modules.expense_service import expense_service
from service_modules.payment_service import normalize_phone, payment_service

from conftest import create_member


def test_normalize_phone():
    assert normalize_phone("+91 98765-43210") == "+919876543210"


def test_payment_by_email_and_phone(admin):
    member = create_member(admin).member

    by_email = payment_service.add_payment_by_email(admin, "A@B.com", 1500, PaymentStatus.paid)
    by_phone = payment_service.add_payment_by_phone(admin, "+91 9876543210", 500, PaymentStatus.pending)

    assert by_email.member_id == member.principal
    assert by_phone.member_id == member.principal
    assert by_email.id.startswith("PAY_")
    assert len(payment_service.get_all_payments(admin)) == 2


def test_unknown_identifier(admin):
    with pytest.raises(HTTPException) as exc:
        payment_service.add_payment_by_email(admin, "ghost@b.com", 100, PaymentStatus.paid)
    assert exc.value.status_code == 404
    assert exc.value.detail.endswith("does not belong to any member")


def test_amount_must_be_positive(admin):
    create_member(admin)
    with pytest.raises(HTTPException) as exc:
        payment_service.add_payment_by_email(admin, "a@b.com", 0, PaymentStatus.paid)
    assert exc.value.status_code == 400


def test_member_sees_only_own_payments(admin):
    mine = create_member(admin).member
    create_member(admin, email="c@d.com", phone="")
    payment_service.add_payment_by_email(admin, "a@b.com", 1500, PaymentStatus.paid)
    payment_service.add_payment_by_email(admin, "c@d.com", 900, PaymentStatus.paid)

    payments = payment_service.get_member_payments(Caller(member_id=mine.id))
    assert [p.amount for p in payments] == [1500]
    assert payment_service.get_member_payments(Caller()) == []


def test_update_and_delete_payment(admin):
    member = create_member(admin).member
    payment = payment_service.add_payment(
        admin, Payment(id="", member_id=member.principal, timestamp=0, amount=700, status=PaymentStatus.pending)
    )
    updated = payment_service.update_payment(admin, payment.model_copy(update={"status": PaymentStatus.paid}))
    assert updated.status == PaymentStatus.paid
    assert payment_service.get_payment(admin, payment.id).status == PaymentStatus.paid

    payment_service.delete_payment(admin, payment.id)
    with pytest.raises(HTTPException) as exc:
        payment_service.get_payment(admin, payment.id)
    assert exc.value.status_code == 404


def test_expenses(admin):
    expense = expense_service.add_expense(
        admin, Expense(id="", type=ExpenseType.equipment, description="Dumbbells", timestamp=0, amount=12000)
    )
    assert expense.id.startswith("EXP_")
    assert [e.description for e in expense_service.get_all_expenses(admin)] == ["Dumbbells"]

    expense_service.delete_expense(admin, expense.id)
    assert expense_service.get_all_expenses(admin) == []


def test_expenses_are_admin_only():
    with pytest.raises(HTTPException) as exc:
        expense_service.get_all_expenses(Caller(principal="nobody"))
    assert exc.value.status_code == 403
