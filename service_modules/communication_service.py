"""
Communication Service - simulated email/SMS/WhatsApp delivery.

Nothing is actually sent; every message is written to the communication
log so admins can copy it and deliver it by hand.
"""
from .base import (
    HTTPException, logging,
    get_db_session, CommunicationLogORM, Caller, require_admin, now_ns
)
from models import (
    CommunicationChannel, CommunicationStatus, CommunicationLogEntry,
    Credentials, MemberProfile
)
from typing import List

logger = logging.getLogger("gym_app")

GYM_NAME = "Prime Fit"


class CommunicationService:
    """Service for the communication log."""

    def log_communication(
        self,
        caller: Caller,
        to: str,
        channel: CommunicationChannel,
        content: str,
        status: CommunicationStatus
    ) -> CommunicationLogEntry:
        db = get_db_session()
        try:
            require_admin(db, caller, "log communications")
            entry = self.record(db, to, channel, content, status)
            db.commit()
            return entry
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to log communication: {str(e)}")
        finally:
            db.close()

    def record(self, db, to: str, channel: CommunicationChannel, content: str, status: CommunicationStatus) -> CommunicationLogEntry:
        """Add a log row to an open session. The caller commits."""
        row = CommunicationLogORM(
            recipient=to,
            channel=channel.value,
            content=content,
            status=status.value,
            timestamp=now_ns()
        )
        db.add(row)
        logger.info(f"COMM: {channel.value} to {to or '<none>'} ({status.value})")
        return self._log_to_model(row)

    def get_all_communication_logs(self, caller: Caller) -> List[CommunicationLogEntry]:
        db = get_db_session()
        try:
            require_admin(db, caller, "view communication logs")
            rows = db.query(CommunicationLogORM).order_by(CommunicationLogORM.timestamp.desc()).all()
            return [self._log_to_model(r) for r in rows]
        finally:
            db.close()

    def get_communication_logs_by_email(self, caller: Caller, email: str) -> List[CommunicationLogEntry]:
        db = get_db_session()
        try:
            require_admin(db, caller, "view communication logs")
            rows = db.query(CommunicationLogORM).filter(
                CommunicationLogORM.recipient == email
            ).order_by(CommunicationLogORM.timestamp.desc()).all()
            return [self._log_to_model(r) for r in rows]
        finally:
            db.close()

    def send_welcome_messages(self, db, member: MemberProfile, credentials: Credentials) -> List[CommunicationLogEntry]:
        """Log the welcome message on every channel. SMS/WhatsApp fail without a phone number."""
        body = (
            f"Welcome to {GYM_NAME}, {member.name}! "
            f"Your {member.membership_plan.name} membership is active. "
            f"Log in with email {credentials.email} and password {credentials.password}."
        )
        entries = [
            self.record(db, credentials.email, CommunicationChannel.email,
                        f"Subject: Welcome to {GYM_NAME}\n\n{body}", CommunicationStatus.sent)
        ]
        phone_status = CommunicationStatus.sent if member.phone else CommunicationStatus.failed
        for channel in (CommunicationChannel.sms, CommunicationChannel.whatsapp):
            entries.append(self.record(db, member.phone, channel, body, phone_status))
        return entries

    def _log_to_model(self, row: CommunicationLogORM) -> CommunicationLogEntry:
        return CommunicationLogEntry(
            channel=row.channel,
            content=row.content,
            status=row.status,
            timestamp=row.timestamp,
            recipient=row.recipient or ""
        )


# Singleton instance
communication_service = CommunicationService()

def get_communication_service() -> CommunicationService:
    """Dependency injection helper."""
    return communication_service
