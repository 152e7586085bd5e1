"""
Report Routes - admin reports, member notifications and the communication log.
"""
from fastapi import APIRouter, Depends
from typing import List

from models import ReportSummary, Notification, CommunicationLogEntry, LogCommunicationRequest
from service_modules.gym_backend import GymBackend
from .deps import get_backend

router = APIRouter(tags=["Reports"])


@router.get("/api/reports", response_model=ReportSummary)
async def get_reports(backend: GymBackend = Depends(get_backend)):
    return backend.get_reports()


@router.get("/api/notifications/me", response_model=List[Notification])
async def get_member_notifications(backend: GymBackend = Depends(get_backend)):
    return backend.get_member_notifications()


@router.post("/api/communications", response_model=CommunicationLogEntry)
async def log_communication(body: LogCommunicationRequest, backend: GymBackend = Depends(get_backend)):
    return backend.log_communication(body.to, body.channel, body.content, body.status)


@router.get("/api/communications", response_model=List[CommunicationLogEntry])
async def get_all_communication_logs(backend: GymBackend = Depends(get_backend)):
    return backend.get_all_communication_logs()


@router.get("/api/communications/{email}", response_model=List[CommunicationLogEntry])
async def get_communication_logs_by_email(email: str, backend: GymBackend = Depends(get_backend)):
    return backend.get_communication_logs_by_email(email)
