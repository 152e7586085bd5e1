"""
Identity resolution: which screen applies to the current request.

    Initializing -> Unauthenticated | AdminFlow | MemberFlow
    AdminFlow:  Loading -> Error | NoProfile | Authorized(role)
    MemberFlow: Loading -> NoProfileError | Authorized

Terminal states either render a dashboard or a blocking error screen with a
manual recovery action. Nothing here retries on its own.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from member_session import MemberSession
from models import UserRole


class FetchState(str, Enum):
    loading = "loading"
    success = "success"
    error = "error"


@dataclass(frozen=True)
class FetchResult:
    state: FetchState
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def loading(cls):
        return cls(FetchState.loading)

    @classmethod
    def ok(cls, data):
        return cls(FetchState.success, data=data)

    @classmethod
    def failed(cls, error: str):
        return cls(FetchState.error, error=error)

    @property
    def is_loading(self) -> bool:
        return self.state == FetchState.loading

    @property
    def is_error(self) -> bool:
        return self.state == FetchState.error


class ViewKind(str, Enum):
    initializing = "initializing"
    login = "login"
    loading = "loading"
    connection_error = "connection_error"
    admin_error = "admin_error"
    admin_no_profile = "admin_no_profile"
    member_no_profile = "member_no_profile"
    admin_dashboard = "admin_dashboard"
    member_dashboard = "member_dashboard"


class RecoveryAction(str, Enum):
    retry = "retry"
    logout = "logout"
    return_to_login = "return_to_login"


@dataclass(frozen=True)
class ViewState:
    kind: ViewKind
    title: Optional[str] = None
    message: Optional[str] = None
    action: Optional[RecoveryAction] = None
    profile: Any = None
    role: Optional[UserRole] = None

    def to_dict(self) -> dict:
        profile = self.profile
        if profile is not None and hasattr(profile, "model_dump"):
            profile = profile.model_dump(mode="json")
        return {
            "kind": self.kind.value,
            "title": self.title,
            "message": self.message,
            "action": self.action.value if self.action else None,
            "profile": profile,
            "role": self.role.value if self.role else None,
        }


@dataclass
class IdentityInputs:
    member_session: MemberSession
    identity: Optional[str] = None
    initializing: bool = False
    backend_available: bool = True
    user_profile: FetchResult = FetchResult.loading()
    user_role: FetchResult = FetchResult.loading()
    member_profile: FetchResult = FetchResult.loading()


def resolve_view(inputs: IdentityInputs) -> ViewState:
    if inputs.initializing:
        return ViewState(ViewKind.initializing, message="Loading Prime Fit...")

    # Reading the record clears it when it cannot be parsed
    is_member = inputs.member_session.is_authenticated()
    is_admin = inputs.identity is not None

    if not is_admin and not is_member:
        return ViewState(ViewKind.login)

    if not inputs.backend_available:
        return ViewState(
            ViewKind.connection_error,
            title="Connection Error",
            message="Unable to connect to the backend service.",
            action=RecoveryAction.retry,
        )

    if is_member and not is_admin:
        return _resolve_member_flow(inputs)
    return _resolve_admin_flow(inputs)


def _resolve_member_flow(inputs: IdentityInputs) -> ViewState:
    result = inputs.member_profile
    if result.is_loading:
        return ViewState(ViewKind.loading, message="Loading your dashboard...")
    if result.state == FetchState.success and result.data is not None:
        return ViewState(ViewKind.member_dashboard, profile=result.data)
    return ViewState(
        ViewKind.member_no_profile,
        title="Profile Not Found",
        message="Unable to load your member profile. Please log in again.",
        action=RecoveryAction.return_to_login,
    )


def _resolve_admin_flow(inputs: IdentityInputs) -> ViewState:
    profile, role = inputs.user_profile, inputs.user_role
    if profile.is_loading or role.is_loading:
        return ViewState(ViewKind.loading, message="Loading your dashboard...")

    if profile.is_error or role.is_error:
        return ViewState(
            ViewKind.admin_error,
            title="Error Loading Profile",
            message="Failed to load your profile or role information.",
            action=RecoveryAction.retry,
        )

    user_role = UserRole(role.data)
    if user_role != UserRole.admin:
        member = inputs.member_profile.data if inputs.member_profile.state == FetchState.success else None
        return ViewState(ViewKind.member_dashboard, profile=member, role=user_role)

    if profile.data is None:
        # Admin profiles come from self-registration, so there is nothing to fall back to
        return ViewState(
            ViewKind.admin_no_profile,
            title="Profile Not Found",
            message="No admin profile is registered for this identity.",
            action=RecoveryAction.logout,
            role=user_role,
        )

    return ViewState(ViewKind.admin_dashboard, profile=profile.data, role=user_role)
