"""
QR Service - signed member QR codes for front-desk check-in.

Payload format: GYMQR:<member_id>:<signature>, where the signature is a
truncated HMAC-SHA256 of "GYMQR:<member_id>" under SECRET_KEY.
"""
from .base import (
    HTTPException, logging,
    get_db_session, MemberORM, Caller, require_admin, find_caller_member
)
from auth import SECRET_KEY
from typing import Optional
import hashlib
import hmac
import io
import qrcode

logger = logging.getLogger("gym_app")

QR_PREFIX = "GYMQR"
SIGNATURE_LENGTH = 16


def _sign(member_id: int) -> str:
    message = f"{QR_PREFIX}:{member_id}".encode("utf-8")
    return hmac.new(SECRET_KEY.encode("utf-8"), message, hashlib.sha256).hexdigest()[:SIGNATURE_LENGTH]


def encode_qr_payload(member_id: int) -> str:
    return f"{QR_PREFIX}:{member_id}:{_sign(member_id)}"


def decode_qr_payload(qr: str) -> int:
    """Return the member id of a well-formed, correctly signed payload."""
    parts = (qr or "").strip().split(":")
    if len(parts) != 3 or parts[0] != QR_PREFIX or not parts[1].isdigit():
        raise HTTPException(status_code=400, detail="Invalid QR code")
    member_id = int(parts[1])
    if not hmac.compare_digest(parts[2], _sign(member_id)):
        raise HTTPException(status_code=400, detail="Invalid QR code")
    return member_id


def render_qr_png(data: str, box_size: int = 8, border: int = 2) -> bytes:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


class QrService:

    def generate_qr_code(self, caller: Caller, member_id: int) -> str:
        db = get_db_session()
        try:
            own = find_caller_member(db, caller)
            if own is None or own.id != member_id:
                require_admin(db, caller, "generate QR codes")
            if not db.query(MemberORM).filter(MemberORM.id == member_id).first():
                raise HTTPException(status_code=404, detail="Member not found")
            return encode_qr_payload(member_id)
        finally:
            db.close()

    def get_my_qr_code(self, caller: Caller) -> Optional[str]:
        db = get_db_session()
        try:
            member = find_caller_member(db, caller)
            return encode_qr_payload(member.id) if member else None
        finally:
            db.close()

    def validate_qr_code(self, caller: Caller, qr: str) -> int:
        db = get_db_session()
        try:
            require_admin(db, caller, "validate QR codes")
            member_id = decode_qr_payload(qr)
            if not db.query(MemberORM).filter(MemberORM.id == member_id).first():
                raise HTTPException(status_code=404, detail="Member not found")
            logger.info(f"QR: Validated code for member {member_id}")
            return member_id
        finally:
            db.close()


# Singleton instance
qr_service = QrService()

def get_qr_service() -> QrService:
    """Dependency injection helper."""
    return qr_service
