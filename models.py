from pydantic import BaseModel
from typing import List, Optional, Tuple, Union
from enum import Enum

# --- ENUMS ---
class AppRole(str, Enum):
    Member = "Member"
    Admin = "Admin"

class UserRole(str, Enum):
    admin = "admin"
    user = "user"
    guest = "guest"

class ApprovalStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"

class MembershipStatus(str, Enum):
    active = "active"
    expired = "expired"
    pending = "pending"

class PaymentStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    failed = "failed"

class ExpenseType(str, Enum):
    equipment = "equipment"
    rent = "rent"
    utilities = "utilities"
    other = "other"

class ClassType(str, Enum):
    yoga = "yoga"
    crossfit = "crossfit"
    zumba = "zumba"
    pilates = "pilates"

class BookingStatus(str, Enum):
    booked = "booked"
    cancelled = "cancelled"
    completed = "completed"

class CommunicationChannel(str, Enum):
    email = "email"
    sms = "sms"
    whatsapp = "whatsapp"

class CommunicationStatus(str, Enum):
    pending = "pending"
    sent = "sent"
    failed = "failed"

# --- PLANS ---
class MembershipPlan(BaseModel):
    id: str
    name: str
    duration_months: int
    benefits: str = ""
    price: int

class Exercise(BaseModel):
    name: str
    reps: int
    sets: int
    weight_kg: int = 0

class WorkoutPlan(BaseModel):
    id: str
    name: str
    description: str = ""
    exercises: List[Exercise] = []
    duration_weeks: int

class Meal(BaseModel):
    name: str
    description: str = ""
    calories: int
    protein_g: int
    carbs_g: int
    fat_g: int

class DietPlan(BaseModel):
    id: str
    name: str
    description: str = ""
    meals: List[Meal] = []
    calories: int
    protein_g: int
    carbs_g: int
    fat_g: int

# --- MEMBERS ---
# Times are nanoseconds since the Unix epoch.
class MemberProfile(BaseModel):
    id: int
    principal: str
    name: str
    email: str = ""
    phone: str = ""
    membership_status: MembershipStatus
    start_date: int
    end_date: int
    membership_plan: MembershipPlan
    workout_plan: Optional[WorkoutPlan] = None
    diet_plan: Optional[DietPlan] = None
    profile_pic: Optional[str] = None

class SerializedMemberProfile(BaseModel):
    """MemberProfile with its big-integer fields carried as decimal strings."""
    id: str
    principal: str
    name: str
    email: str = ""
    phone: str = ""
    membership_status: MembershipStatus
    start_date: str
    end_date: str
    membership_plan: MembershipPlan
    workout_plan: Optional[WorkoutPlan] = None
    diet_plan: Optional[DietPlan] = None
    profile_pic: Optional[str] = None

class MinimalMember(BaseModel):
    id: int
    name: str

class RegisteredMemberInfo(BaseModel):
    id: str
    name: str
    email: str
    phone: str = ""

class Credentials(BaseModel):
    email: str
    password: str

class ManualCreateMemberRequest(BaseModel):
    name: str
    credentials: Credentials
    phone: str = ""
    membership_plan: MembershipPlan
    profile_pic: Optional[str] = None

class CommunicationLogEntry(BaseModel):
    channel: CommunicationChannel
    content: str
    status: CommunicationStatus
    timestamp: int
    recipient: str = ""

class ManualCreateMemberResponse(BaseModel):
    member: MemberProfile
    credentials: Credentials
    communication_logs: List[CommunicationLogEntry]

class AddMemberRequest(BaseModel):
    name: str

class MemberLoginRequest(BaseModel):
    email: str
    password: str

# --- IDENTITY ---
class UserProfile(BaseModel):
    id: str
    name: str
    email: str = ""
    role: AppRole
    profile_pic: Optional[str] = None

class UserApprovalInfo(BaseModel):
    principal: str
    status: ApprovalStatus

class AssignRoleRequest(BaseModel):
    user: str
    role: UserRole

class SetApprovalRequest(BaseModel):
    user: str
    status: ApprovalStatus

class IdentityLoginRequest(BaseModel):
    principal: str

# --- FINANCE ---
class Payment(BaseModel):
    id: str
    member_id: str  # principal
    timestamp: int
    amount: int
    status: PaymentStatus

class PaymentByIdentifierRequest(BaseModel):
    identifier: str
    amount: int
    status: PaymentStatus = PaymentStatus.paid

class Expense(BaseModel):
    id: str
    type: ExpenseType
    description: str = ""
    timestamp: int
    amount: int

# --- ACTIVITY ---
class AttendanceRecord(BaseModel):
    member_id: str  # principal
    check_in_time: int
    check_out_time: Optional[int] = None

class ClassBooking(BaseModel):
    id: str
    member_id: str  # principal
    class_type: ClassType
    date: int
    status: BookingStatus = BookingStatus.booked

# --- NOTIFICATIONS ---
class Notification(BaseModel):
    title: str
    message: str
    icon: str
    color: str
    priority: int
    timestamp: int
    actions: List[Tuple[str, str]] = []

# --- COMMUNICATION ---
class LogCommunicationRequest(BaseModel):
    to: str
    channel: CommunicationChannel
    content: str
    status: CommunicationStatus = CommunicationStatus.sent

# --- REPORTS ---
class ReportMember(BaseModel):
    member: MemberProfile
    is_expired: bool
    is_expiring_soon: bool
    money_due: int

class ReportSummary(BaseModel):
    members: List[ReportMember]
    total_payments: int
    total_expenses: int
    profit: int
    monthly_revenue: int

# --- QR ---
class ValidateQrRequest(BaseModel):
    qr: str

# --- STRIPE ---
class ShoppingItem(BaseModel):
    product_name: str
    product_description: str = ""
    price_in_cents: int
    quantity: int
    currency: str = "inr"

class StripeConfiguration(BaseModel):
    secret_key: str
    allowed_countries: List[str] = []

class CheckoutSessionRequest(BaseModel):
    items: List[ShoppingItem]
    success_url: str
    cancel_url: str

class StripeSessionCompleted(BaseModel):
    kind: str = "completed"
    response: str
    user_principal: Optional[str] = None

class StripeSessionFailed(BaseModel):
    kind: str = "failed"
    error: str

StripeSessionStatus = Union[StripeSessionCompleted, StripeSessionFailed]
