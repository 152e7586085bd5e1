"""
Finance Routes - payments and expenses.
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import List

from models import Payment, PaymentByIdentifierRequest, Expense
from service_modules.gym_backend import GymBackend
from service_modules.gym_queries import GymQueries
from .deps import get_backend, get_queries

router = APIRouter(tags=["Finance"])


# --- Payments ---

@router.get("/api/payments", response_model=List[Payment])
async def get_all_payments(backend: GymBackend = Depends(get_backend)):
    return backend.get_all_payments()


@router.get("/api/payments/me", response_model=List[Payment])
async def get_member_payments(backend: GymBackend = Depends(get_backend)):
    return backend.get_member_payments()


@router.get("/api/payments/{payment_id}", response_model=Payment)
async def get_payment(payment_id: str, backend: GymBackend = Depends(get_backend)):
    return backend.get_payment(payment_id)


@router.post("/api/payments", response_model=Payment)
async def add_payment(payment: Payment, queries: GymQueries = Depends(get_queries)):
    return queries.add_payment(payment)


@router.post("/api/payments/by-email", response_model=Payment)
async def add_payment_by_email(body: PaymentByIdentifierRequest, queries: GymQueries = Depends(get_queries)):
    return queries.add_payment_by_email(body.identifier, body.amount, body.status)


@router.post("/api/payments/by-phone", response_model=Payment)
async def add_payment_by_phone(body: PaymentByIdentifierRequest, queries: GymQueries = Depends(get_queries)):
    return queries.add_payment_by_phone(body.identifier, body.amount, body.status)


@router.put("/api/payments/{payment_id}", response_model=Payment)
async def update_payment(payment_id: str, payment: Payment, queries: GymQueries = Depends(get_queries)):
    if payment.id != payment_id:
        raise HTTPException(status_code=400, detail="Payment id does not match the URL")
    return queries.update_payment(payment)


@router.delete("/api/payments/{payment_id}")
async def delete_payment(payment_id: str, queries: GymQueries = Depends(get_queries)):
    return queries.delete_payment(payment_id)


# --- Expenses ---

@router.get("/api/expenses", response_model=List[Expense])
async def get_all_expenses(backend: GymBackend = Depends(get_backend)):
    return backend.get_all_expenses()


@router.post("/api/expenses", response_model=Expense)
async def add_expense(expense: Expense, queries: GymQueries = Depends(get_queries)):
    return queries.add_expense(expense)


@router.delete("/api/expenses/{expense_id}")
async def delete_expense(expense_id: str, queries: GymQueries = Depends(get_queries)):
    return queries.delete_expense(expense_id)
