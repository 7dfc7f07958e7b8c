from sqlalchemy.orm import Session
from sqlalchemy import and_, or_
from typing import List, Optional, Tuple
import logging

from parkpass.bookings.pricing import PriceType
from parkpass.exceptions import NotFoundError
from parkpass.models import ParkingSpot, SpotStatus, User, UserRole
from parkpass.spots.geo import calculate_distance, get_bounding_box
from parkpass.spots.schemas import SpotCreate, SpotUpdate, SpotSearch

logger = logging.getLogger(__name__)

class SpotService:
    @staticmethod
    def get_spot_by_id(db: Session, spot_id: int) -> Optional[ParkingSpot]:
        """Get spot by ID"""
        return db.query(ParkingSpot).filter(ParkingSpot.id == spot_id).first()

    @staticmethod
    def search_spots(
        db: Session,
        search: SpotSearch,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Tuple[ParkingSpot, Optional[float]]], int]:
        """Bookable spots matching the filters, paired with their distance in km"""
        query = db.query(ParkingSpot).filter(
            ParkingSpot.status == SpotStatus.ACTIVE,
            ParkingSpot.available_slots > 0
        )

        if search.search:
            pattern = f"%{search.search}%"
            query = query.filter(or_(
                ParkingSpot.name.ilike(pattern),
                ParkingSpot.address.ilike(pattern),
                ParkingSpot.description.ilike(pattern)
            ))

        if search.price_type:
            query = query.filter(ParkingSpot.price_type == search.price_type.value)

        has_location = search.lat is not None and search.lng is not None
        if has_location:
            box = get_bounding_box(search.lat, search.lng, search.radius_km)
            query = query.filter(and_(
                ParkingSpot.latitude.between(box["min_lat"], box["max_lat"]),
                ParkingSpot.longitude.between(box["min_lon"], box["max_lon"])
            ))

        results = []
        for spot in query.order_by(ParkingSpot.created_at.desc(), ParkingSpot.id.desc()).all():
            # Price bounds apply to the listed unit price when a price type is fixed,
            # otherwise to the hourly equivalent so mixed listings compare fairly
            price_type = PriceType(spot.price_type)
            compared = spot.price if search.price_type else price_type.hourly_rate(spot.price)
            if search.min_price is not None and compared < search.min_price:
                continue
            if search.max_price is not None and compared > search.max_price:
                continue

            distance = None
            if has_location:
                distance = calculate_distance(search.lat, search.lng, spot.latitude, spot.longitude)
                if distance > search.radius_km:
                    continue
            results.append((spot, distance))

        if search.sort_by == "distance" and has_location:
            results.sort(key=lambda item: item[1])
        elif search.sort_by == "price":
            results.sort(key=lambda item: PriceType(item[0].price_type).hourly_rate(item[0].price))

        total = len(results)
        start = (page - 1) * limit
        return results[start:start + limit], total

    @staticmethod
    def get_owner_spots(
        db: Session,
        owner_id: int,
        status: Optional[SpotStatus] = None,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[ParkingSpot], int]:
        query = db.query(ParkingSpot).filter(ParkingSpot.owner_id == owner_id)
        if status:
            query = query.filter(ParkingSpot.status == status)
        total = query.count()
        spots = (
            query.order_by(ParkingSpot.created_at.desc(), ParkingSpot.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return spots, total

    @staticmethod
    def create_spot(db: Session, owner: User, spot: SpotCreate) -> ParkingSpot:
        """Create a new listing with every slot available"""
        data = spot.dict()
        data["price_type"] = spot.price_type.value
        db_spot = ParkingSpot(
            owner_id=owner.id,
            available_slots=spot.total_slots,
            status=SpotStatus.ACTIVE,
            **data
        )
        db.add(db_spot)
        db.commit()
        db.refresh(db_spot)

        logger.info(f"Parking spot created: {db_spot.id} by owner: {owner.id}")
        return db_spot

    @staticmethod
    def update_spot(db: Session, spot_id: int, actor: User, spot_update: SpotUpdate) -> ParkingSpot:
        """Apply an owner edit; a capacity change shifts available slots by the same amount"""
        query = db.query(ParkingSpot).filter(ParkingSpot.id == spot_id)
        if actor.role != UserRole.ADMIN:
            query = query.filter(ParkingSpot.owner_id == actor.id)
        db_spot = query.first()
        if not db_spot:
            raise NotFoundError("Parking spot not found or access denied")

        update_data = spot_update.dict(exclude_unset=True)
        if update_data.get("price_type") is not None:
            update_data["price_type"] = update_data["price_type"].value

        new_total = update_data.get("total_slots")
        if new_total is not None and new_total != db_spot.total_slots:
            difference = new_total - db_spot.total_slots
            update_data["available_slots"] = min(new_total, max(0, db_spot.available_slots + difference))

        for field, value in update_data.items():
            setattr(db_spot, field, value)

        db.commit()
        db.refresh(db_spot)

        logger.info(f"Parking spot updated: {db_spot.id}")
        return db_spot
