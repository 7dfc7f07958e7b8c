#!/usr/bin/env python3

from parkpass.auth.utils import get_password_hash
from parkpass.database import Base, SessionLocal, engine
from parkpass.models import (
    Booking, EntryLog, Notification, ParkingSpot, Payment, SpotStatus, User, UserRole, Vehicle
)


def create_seed_data():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        print("🚀 Creating seed data for the ParkPass marketplace...")

        # Clear existing data (in reverse dependency order)
        print("Clearing existing data...")
        db.query(EntryLog).delete()
        db.query(Payment).delete()
        db.query(Notification).delete()
        db.query(Booking).delete()
        db.query(ParkingSpot).delete()
        db.query(Vehicle).delete()
        db.query(User).delete()

        # 1. Create users
        print("Creating users...")
        admin = User(
            name="Admin User",
            email="admin@parkpass.com",
            password=get_password_hash("admin123"),
            phone="+1-555-0001",
            role=UserRole.ADMIN
        )
        owner_password = get_password_hash("owner123")
        owners = [
            User(
                name="John Smith",
                email="owner1@parkpass.com",
                password=owner_password,
                phone="+1-555-0002",
                role=UserRole.OWNER,
                business_name="Downtown Parking Solutions",
                business_address="123 Business Ave, Downtown"
            ),
            User(
                name="Sarah Johnson",
                email="owner2@parkpass.com",
                password=owner_password,
                phone="+1-555-0003",
                role=UserRole.OWNER,
                business_name="Mall Parking Services",
                business_address="456 Mall Road, Westside"
            ),
        ]
        customer_password = get_password_hash("customer123")
        customers = [
            User(
                name="Mike Wilson",
                email="customer1@parkpass.com",
                password=customer_password,
                phone="+1-555-0004",
                role=UserRole.CUSTOMER
            ),
            User(
                name="Emily Davis",
                email="customer2@parkpass.com",
                password=customer_password,
                phone="+1-555-0005",
                role=UserRole.CUSTOMER
            ),
        ]
        db.add_all([admin] + owners + customers)
        db.flush()

        # 2. Create vehicles
        print("Creating vehicles...")
        vehicles = [
            Vehicle(user_id=customers[0].id, make="Toyota", model="Camry", license_plate="ABC-123", color="Silver"),
            Vehicle(user_id=customers[0].id, make="Honda", model="Civic", license_plate="XYZ-789", color="Blue"),
            Vehicle(user_id=customers[1].id, make="BMW", model="X3", license_plate="BMW-456", color="Black"),
        ]
        db.add_all(vehicles)

        # 3. Create parking spots
        print("Creating parking spots...")
        spot_rows = [
            # (owner, name, description, address, lat, lon, price, price_type, slots, hours, phone)
            (owners[0], "Central Plaza Parking",
             "Premium parking facility in the heart of downtown with security and EV charging.",
             "123 Main Street, Downtown", 40.7589, -73.9851, 25, "hour", 50, "24/7", "+1-555-123-4567"),
            (owners[1], "Riverside Mall Parking",
             "Convenient mall parking with direct access to shopping and dining.",
             "456 River Road, Westside", 40.7505, -73.9934, 150, "day", 200, "6:00 AM - 11:00 PM", "+1-555-987-6543"),
            (owners[0], "Airport Express Parking",
             "Airport parking with complimentary shuttle service.",
             "789 Airport Way, Terminal District", 40.6413, -73.7781, 300, "day", 800, "24/7", "+1-555-456-7890"),
        ]
        spots = [
            ParkingSpot(
                owner_id=owner.id,
                name=name,
                description=description,
                address=address,
                latitude=latitude,
                longitude=longitude,
                price=price,
                price_type=price_type,
                total_slots=slots,
                available_slots=slots,
                status=SpotStatus.ACTIVE,
                opening_hours=opening_hours,
                phone=phone
            )
            for (owner, name, description, address, latitude, longitude,
                 price, price_type, slots, opening_hours, phone) in spot_rows
        ]
        db.add_all(spots)

        # Commit all changes
        db.commit()
        print("✅ Successfully created seed data for ParkPass!")
        print("Created:")
        print(f"  - {1 + len(owners) + len(customers)} users (1 admin, {len(owners)} owners, {len(customers)} customers)")
        print(f"  - {len(vehicles)} vehicles")
        print(f"  - {len(spots)} parking spots")
        print("Demo logins: admin@parkpass.com / admin123, owner1@parkpass.com / owner123, "
              "customer1@parkpass.com / customer123")

    except Exception as e:
        print(f"❌ Error creating seed data: {e}")
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    create_seed_data()
