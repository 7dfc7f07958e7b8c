import os
from datetime import datetime

import pytest

# Point the app at a private in-memory database before anything imports it
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from parkpass.auth.utils import create_access_token  # noqa: E402
from parkpass.database import Base, SessionLocal, engine  # noqa: E402
from parkpass.models import ParkingSpot, SpotStatus, User, UserRole, Vehicle  # noqa: E402


# Fixed calendar used by the service-level tests
DAY = datetime(2030, 5, 1)


def at(hour: int, minute: int = 0) -> datetime:
    return DAY.replace(hour=hour, minute=minute)


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role: UserRole = UserRole.CUSTOMER, name: str = None) -> User:
        counter["n"] += 1
        user = User(
            name=name or f"{role.value.title()} {counter['n']}",
            email=f"{role.value.lower()}{counter['n']}@example.com",
            password="not-a-real-hash",
            phone=f"+1-555-{counter['n']:04d}",
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_vehicle(db):
    def _make(user: User, plate: str = "ABC-123") -> Vehicle:
        vehicle = Vehicle(user_id=user.id, make="Toyota", model="Corolla", license_plate=plate, color="Blue")
        db.add(vehicle)
        db.commit()
        db.refresh(vehicle)
        return vehicle

    return _make


@pytest.fixture
def make_spot(db):
    def _make(
        owner: User,
        price: float = 25.0,
        price_type: str = "hour",
        total_slots: int = 3,
        available_slots: int = None,
        status: SpotStatus = SpotStatus.ACTIVE,
        latitude: float = 40.7128,
        longitude: float = -74.0060,
        name: str = "Downtown Garage",
    ) -> ParkingSpot:
        spot = ParkingSpot(
            owner_id=owner.id,
            name=name,
            address="123 Main Street, Downtown",
            latitude=latitude,
            longitude=longitude,
            price=price,
            price_type=price_type,
            total_slots=total_slots,
            available_slots=total_slots if available_slots is None else available_slots,
            status=status,
        )
        db.add(spot)
        db.commit()
        db.refresh(spot)
        return spot

    return _make


@pytest.fixture
def customer(make_user):
    return make_user(UserRole.CUSTOMER, name="Mike Wilson")


@pytest.fixture
def owner(make_user):
    return make_user(UserRole.OWNER, name="John Smith")


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN, name="Admin User")


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        token = create_access_token({"sub": str(user.id), "role": user.role.value})
        return {"Authorization": f"Bearer {token}"}

    return _headers
