from sqlalchemy import Column, Integer, BigInteger, String, Boolean, DateTime, Text, ForeignKey, Float, JSON, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from parkpass.database import Base

# Integer keys autoincrement on SQLite too
IdType = BigInteger().with_variant(Integer, "sqlite")

# ================================
# Enumerations
# ================================
class UserRole(str, enum.Enum):
    CUSTOMER = "CUSTOMER"
    OWNER = "OWNER"
    ADMIN = "ADMIN"

class SpotStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    MAINTENANCE = "MAINTENANCE"

class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    EXTENDED = "EXTENDED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"

class PaymentMethod(str, enum.Enum):
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    WALLET = "WALLET"
    CASH = "CASH"

class EntryAction(str, enum.Enum):
    ENTRY = "ENTRY"
    EXIT = "EXIT"
    EXTEND = "EXTEND"

class EntryMethod(str, enum.Enum):
    QR = "QR"
    PIN = "PIN"
    MANUAL = "MANUAL"
    AUTO = "AUTO"
    APP = "APP"

class NotificationType(str, enum.Enum):
    BOOKING = "BOOKING"
    PAYMENT = "PAYMENT"
    REMINDER = "REMINDER"
    SYSTEM = "SYSTEM"

# ================================
# Users & Vehicles
# ================================
class User(Base):
    __tablename__ = "users"

    id = Column(IdType, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    phone = Column(String(32))
    role = Column(SAEnum(UserRole, native_enum=False), nullable=False, default=UserRole.CUSTOMER, index=True)
    business_name = Column(String(255))
    business_address = Column(String(500))
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    vehicles = relationship("Vehicle", back_populates="user")
    spots = relationship("ParkingSpot", back_populates="owner")
    bookings = relationship("Booking", back_populates="user")
    notifications = relationship("Notification", back_populates="user")

class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(IdType, primary_key=True, index=True)
    user_id = Column(IdType, ForeignKey("users.id"), nullable=False, index=True)
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    license_plate = Column(String(32), nullable=False, index=True)
    color = Column(String(50))
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="vehicles")
    bookings = relationship("Booking", back_populates="vehicle")

# ================================
# Parking Spots
# ================================
class ParkingSpot(Base):
    __tablename__ = "parking_spots"

    id = Column(IdType, primary_key=True, index=True)
    owner_id = Column(IdType, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text)
    address = Column(String(500), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    price = Column(Float, nullable=False)
    price_type = Column(String(10), nullable=False, default="hour")
    total_slots = Column(Integer, nullable=False)
    available_slots = Column(Integer, nullable=False)
    status = Column(SAEnum(SpotStatus, native_enum=False), nullable=False, default=SpotStatus.ACTIVE, index=True)
    opening_hours = Column(String(255))
    phone = Column(String(32))
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    owner = relationship("User", back_populates="spots")
    bookings = relationship("Booking", back_populates="spot")

# ================================
# Bookings, Payments & Entry Logs
# ================================
class Booking(Base):
    __tablename__ = "bookings"

    id = Column(IdType, primary_key=True, index=True)
    spot_id = Column(IdType, ForeignKey("parking_spots.id"), nullable=False, index=True)
    user_id = Column(IdType, ForeignKey("users.id"), nullable=False, index=True)
    vehicle_id = Column(IdType, ForeignKey("vehicles.id"), nullable=False)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    reserved_end_time = Column(DateTime, nullable=False, index=True)
    actual_end_time = Column(DateTime)
    total_cost = Column(Float, nullable=False)
    qr_code = Column(String(64), unique=True, nullable=False)
    pin = Column(String(4), nullable=False, index=True)
    is_extended = Column(Boolean, default=False, nullable=False)
    extended_at = Column(DateTime)
    status = Column(SAEnum(BookingStatus, native_enum=False), nullable=False, default=BookingStatus.PENDING, index=True)
    created_at = Column(DateTime, server_default=func.now(), index=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    spot = relationship("ParkingSpot", back_populates="bookings")
    user = relationship("User", back_populates="bookings")
    vehicle = relationship("Vehicle", back_populates="bookings")
    payments = relationship("Payment", back_populates="booking", order_by="Payment.id")
    entry_logs = relationship("EntryLog", back_populates="booking", order_by="EntryLog.id")

class Payment(Base):
    __tablename__ = "payments"

    id = Column(IdType, primary_key=True, index=True)
    booking_id = Column(IdType, ForeignKey("bookings.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    method = Column(SAEnum(PaymentMethod, native_enum=False), nullable=False, default=PaymentMethod.CREDIT_CARD)
    status = Column(SAEnum(PaymentStatus, native_enum=False), nullable=False, default=PaymentStatus.PENDING, index=True)
    transaction_id = Column(String(100))
    processed_at = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    booking = relationship("Booking", back_populates="payments")

class EntryLog(Base):
    __tablename__ = "entry_logs"

    id = Column(IdType, primary_key=True, index=True)
    booking_id = Column(IdType, ForeignKey("bookings.id"), nullable=False, index=True)
    action = Column(SAEnum(EntryAction, native_enum=False), nullable=False)
    method = Column(SAEnum(EntryMethod, native_enum=False), nullable=False)
    code = Column(String(64))
    timestamp = Column(DateTime, nullable=False, server_default=func.now())

    # Relationships
    booking = relationship("Booking", back_populates="entry_logs")

# ================================
# Notifications
# ================================
class Notification(Base):
    __tablename__ = "notifications"

    id = Column(IdType, primary_key=True, index=True)
    user_id = Column(IdType, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(SAEnum(NotificationType, native_enum=False), nullable=False, index=True)
    booking_id = Column(IdType, index=True)
    data = Column(JSON, default=dict)
    is_read = Column(Boolean, default=False, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)

    # Relationships
    user = relationship("User", back_populates="notifications")
