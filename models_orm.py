from sqlalchemy import Column, Integer, BigInteger, String, Text
from database import Base
from datetime import datetime

# --- IDENTITY (Internet Identity principals) ---

class UserProfileORM(Base):
    __tablename__ = "user_profiles"

    principal = Column(String, primary_key=True, index=True)
    name = Column(String)
    email = Column(String, nullable=True)
    app_role = Column(String, default="Member")  # Admin, Member
    profile_pic = Column(String, nullable=True)  # URL or data URL
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String, nullable=True)

class UserRoleORM(Base):
    __tablename__ = "user_roles"

    principal = Column(String, primary_key=True, index=True)
    role = Column(String, index=True)  # admin, user, guest
    assigned_at = Column(String, default=lambda: datetime.utcnow().isoformat())

class ApprovalORM(Base):
    __tablename__ = "approvals"

    principal = Column(String, primary_key=True, index=True)
    status = Column(String, default="pending", index=True)  # pending, approved, rejected
    updated_at = Column(String, default=lambda: datetime.utcnow().isoformat())

# --- MEMBERSHIP ---

class MembershipPlanORM(Base):
    __tablename__ = "membership_plans"

    id = Column(String, primary_key=True, index=True)
    name = Column(String)
    duration_months = Column(Integer)
    benefits = Column(Text, default="")
    price = Column(BigInteger)  # whole currency units

class MemberORM(Base):
    __tablename__ = "members"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    principal = Column(String, index=True)
    name = Column(String)
    email = Column(String, index=True, nullable=True)
    phone = Column(String, index=True, nullable=True)
    hashed_password = Column(String, nullable=True)  # Only for email/password members
    membership_status = Column(String, default="pending", index=True)  # active, expired, pending
    start_date = Column(BigInteger, default=0)  # nanoseconds since epoch
    end_date = Column(BigInteger, default=0)

    # Nested plans kept as JSON (Schema: MembershipPlan / WorkoutPlan / DietPlan)
    membership_plan_json = Column(Text)
    workout_plan_json = Column(Text, nullable=True)
    diet_plan_json = Column(Text, nullable=True)

    profile_pic = Column(String, nullable=True)
    created_at = Column(String, default=lambda: datetime.utcnow().isoformat())

# --- FINANCE ---

class PaymentORM(Base):
    __tablename__ = "payments"

    id = Column(String, primary_key=True, index=True)
    member_principal = Column(String, index=True)
    member_email = Column(String, index=True, nullable=True)  # Lets email members find their payments
    amount = Column(BigInteger)
    status = Column(String, index=True)  # pending, paid, failed
    timestamp = Column(BigInteger)

class ExpenseORM(Base):
    __tablename__ = "expenses"

    id = Column(String, primary_key=True, index=True)
    type = Column(String)  # equipment, rent, utilities, other
    description = Column(String, default="")
    amount = Column(BigInteger)
    timestamp = Column(BigInteger)

# --- ACTIVITY ---

class AttendanceORM(Base):
    __tablename__ = "attendance"

    id = Column(Integer, primary_key=True, autoincrement=True)
    member_principal = Column(String, index=True)
    check_in_time = Column(BigInteger)
    check_out_time = Column(BigInteger, nullable=True)

class ClassBookingORM(Base):
    __tablename__ = "class_bookings"

    id = Column(String, primary_key=True, index=True)
    member_principal = Column(String, index=True)
    class_type = Column(String)  # yoga, crossfit, zumba, pilates
    date = Column(BigInteger)
    status = Column(String, index=True)  # booked, cancelled, completed

# --- INTEGRATIONS ---

class CommunicationLogORM(Base):
    __tablename__ = "communication_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipient = Column(String, index=True)
    channel = Column(String)  # email, sms, whatsapp
    content = Column(Text)
    status = Column(String)  # pending, sent, failed
    timestamp = Column(BigInteger)

class StripeConfigORM(Base):
    __tablename__ = "stripe_config"

    id = Column(Integer, primary_key=True)  # single row, id = 1
    secret_key = Column(String)
    allowed_countries = Column(String, default="")  # Comma-separated ISO codes
    updated_at = Column(String, default=lambda: datetime.utcnow().isoformat())
