"""
Session context for email/password members.

Wraps the per-browser session mapping (request.session in the app) and
owns the two keys written at member login:

    memberAuth          {"authenticated": true, "email": ..., "memberId": ...}
    memberProfileCache  serialized MemberProfile, big integers as strings

Values are stored as JSON text. The record is trusted for the rest of the
session once written; it is never re-validated against the backend.
"""
import json
import logging
from dataclasses import dataclass
from typing import MutableMapping, Optional

from models import MemberProfile
from profiles import LocalProfile, normalize_profile, serialize_profile

MEMBER_AUTH_KEY = "memberAuth"
PROFILE_CACHE_KEY = "memberProfileCache"

logger = logging.getLogger("gym_app")


@dataclass(frozen=True)
class MemberAuth:
    authenticated: bool
    email: str
    member_id: str


class MemberSession:
    def __init__(self, storage: MutableMapping):
        self.storage = storage

    def create(self, profile: MemberProfile) -> MemberAuth:
        auth = MemberAuth(authenticated=True, email=profile.email, member_id=str(profile.id))
        self.storage[MEMBER_AUTH_KEY] = json.dumps({
            "email": auth.email,
            "memberId": auth.member_id,
            "authenticated": True,
        })
        self.storage[PROFILE_CACHE_KEY] = serialize_profile(profile).model_dump_json()
        logger.info(f"SESSION: Member session created for member {auth.member_id}")
        return auth

    def read(self) -> Optional[MemberAuth]:
        """Parse memberAuth. A corrupted record clears the whole session."""
        raw = self.storage.get(MEMBER_AUTH_KEY)
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("memberAuth is not an object")
        except (TypeError, ValueError) as e:
            logger.error(f"SESSION: Failed to parse member auth: {e}")
            self.invalidate()
            return None

        return MemberAuth(
            authenticated=data.get("authenticated") is True,
            email=str(data.get("email") or ""),
            member_id=str(data.get("memberId") or ""),
        )

    def is_authenticated(self) -> bool:
        auth = self.read()
        return auth is not None and auth.authenticated

    def cached_profile(self) -> Optional[MemberProfile]:
        raw = self.storage.get(PROFILE_CACHE_KEY)
        if raw is None:
            return None
        try:
            return normalize_profile(LocalProfile(json.loads(raw)))
        except (TypeError, ValueError) as e:
            logger.error(f"SESSION: Failed to parse cached member profile: {e}")
            return None

    def update_profile(self, profile: MemberProfile) -> bool:
        """Refresh the cached profile. Only authenticated sessions are touched."""
        if not self.is_authenticated():
            return False
        self.storage[PROFILE_CACHE_KEY] = serialize_profile(profile).model_dump_json()
        return True

    def invalidate(self):
        self.storage.pop(MEMBER_AUTH_KEY, None)
        self.storage.pop(PROFILE_CACHE_KEY, None)
