from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Optional

from parkpass.models import User, UserRole, Vehicle
from parkpass.auth.schemas import UserCreate, VehicleCreate
from parkpass.auth.utils import get_password_hash, verify_password

class UserService:
    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get user by email"""
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def create_user(db: Session, user: UserCreate) -> User:
        """Create a new customer or owner account"""
        if user.role == UserRole.ADMIN:
            raise ValueError("Admin accounts cannot be self-registered")

        db_user = User(
            name=user.name,
            email=user.email,
            phone=user.phone,
            password=get_password_hash(user.password),
            role=user.role,
            business_name=user.business_name,
            business_address=user.business_address
        )

        try:
            db.add(db_user)
            db.commit()
            db.refresh(db_user)
            return db_user
        except IntegrityError:
            db.rollback()
            raise ValueError("Email already registered")

    @staticmethod
    def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
        """Authenticate user with email and password"""
        user = UserService.get_user_by_email(db, email)
        if not user:
            return None
        if not verify_password(password, user.password):
            return None
        return user

    @staticmethod
    def add_vehicle(db: Session, user_id: int, vehicle: VehicleCreate) -> Vehicle:
        db_vehicle = Vehicle(user_id=user_id, **vehicle.dict())
        db.add(db_vehicle)
        db.commit()
        db.refresh(db_vehicle)
        return db_vehicle

    @staticmethod
    def get_user_vehicles(db: Session, user_id: int) -> List[Vehicle]:
        return db.query(Vehicle).filter(Vehicle.user_id == user_id).order_by(Vehicle.id).all()
