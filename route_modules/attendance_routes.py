"""
Attendance Routes - check-in/out, front-desk QR scans and class bookings.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from typing import List

from models import (
    AttendanceRecord, MembershipStatus, ClassBooking, BookingStatus, ValidateQrRequest
)
from service_modules.gym_backend import GymBackend
from service_modules.gym_queries import GymQueries
from service_modules.qr_service import render_qr_png
from .deps import get_backend, get_queries

router = APIRouter(tags=["Attendance"])


@router.post("/api/attendance/check-in", response_model=AttendanceRecord)
async def check_in(queries: GymQueries = Depends(get_queries)):
    return queries.check_in()


@router.post("/api/attendance/check-out", response_model=AttendanceRecord)
async def check_out(queries: GymQueries = Depends(get_queries)):
    return queries.check_out()


@router.post("/api/attendance", response_model=AttendanceRecord)
async def add_attendance(record: AttendanceRecord, backend: GymBackend = Depends(get_backend)):
    return backend.add_attendance(record)


@router.get("/api/attendance/me", response_model=List[AttendanceRecord])
async def get_member_attendance(backend: GymBackend = Depends(get_backend)):
    return backend.get_member_attendance()


@router.get("/api/attendance/member/{principal}", response_model=List[AttendanceRecord])
async def get_attendance_by_member(principal: str, backend: GymBackend = Depends(get_backend)):
    return backend.get_attendance_by_member(principal)


@router.get("/api/attendance/status/{status}", response_model=List[AttendanceRecord])
async def get_attendance_by_member_status(status: MembershipStatus, backend: GymBackend = Depends(get_backend)):
    return backend.get_attendance_by_member_status(status)


# --- QR codes ---

@router.get("/api/qr/me")
async def get_my_qr_code(backend: GymBackend = Depends(get_backend)):
    return {"qr": backend.get_my_qr_code()}


@router.get("/api/qr/me.png")
async def get_my_qr_png(backend: GymBackend = Depends(get_backend)):
    qr = backend.get_my_qr_code()
    if qr is None:
        return Response(status_code=404)
    return Response(content=render_qr_png(qr), media_type="image/png")


@router.get("/api/qr/{member_id}")
async def generate_qr_code(member_id: int, backend: GymBackend = Depends(get_backend)):
    return {"qr": backend.generate_qr_code(member_id)}


@router.post("/api/qr/validate")
async def validate_qr_code(body: ValidateQrRequest, backend: GymBackend = Depends(get_backend)):
    return {"member_id": backend.validate_qr_code(body.qr)}


@router.post("/api/qr/check-in", response_model=AttendanceRecord)
async def qr_check_in(body: ValidateQrRequest, backend: GymBackend = Depends(get_backend)):
    """Front desk: validate a scanned code and check that member in."""
    member_id = backend.validate_qr_code(body.qr)
    return backend.check_in_member(member_id)


# --- Class bookings ---

@router.post("/api/bookings", response_model=ClassBooking)
async def add_class_booking(booking: ClassBooking, queries: GymQueries = Depends(get_queries)):
    return queries.add_class_booking(booking)


@router.put("/api/bookings/{booking_id}", response_model=ClassBooking)
async def update_class_booking(booking_id: str, booking: ClassBooking, queries: GymQueries = Depends(get_queries)):
    return queries.update_class_booking(booking_id, booking)


@router.get("/api/bookings/me", response_model=List[ClassBooking])
async def get_member_class_bookings(backend: GymBackend = Depends(get_backend)):
    return backend.get_member_class_bookings()


@router.get("/api/bookings/status/{status}", response_model=List[ClassBooking])
async def get_class_bookings_by_status(status: BookingStatus, backend: GymBackend = Depends(get_backend)):
    return backend.get_class_bookings_by_status(status)
