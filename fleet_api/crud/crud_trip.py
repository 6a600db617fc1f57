from datetime import datetime
from typing import List, Optional, Sequence
from sqlalchemy.orm import Session, joinedload

from fleet_api.crud.base import CRUDBase
from fleet_api.models.trip import Trip
from fleet_api.schemas.trip import TripCreate, TripUpdate, TripStatus

class CRUDTrip(CRUDBase[Trip, TripCreate, TripUpdate]):
    def get_multi_detailed(
        self, db: Session, *, status: Optional[str] = None
    ) -> List[Trip]:
        """Trips newest first, with vehicle and driver loaded for the listing."""
        query = (
            db.query(self.model)
            .options(joinedload(Trip.vehicle), joinedload(Trip.driver))
            .order_by(Trip.created_at.desc(), Trip.id.desc())
        )
        if status:
            query = query.filter(Trip.status == status)
        return query.all()

    def get_by_statuses(
        self, db: Session, *, statuses: Sequence[TripStatus]
    ) -> List[Trip]:
        return (
            db.query(self.model)
            .filter(Trip.status.in_([s.value for s in statuses]))
            .all()
        )

    def get_created_since(self, db: Session, *, since: datetime) -> List[Trip]:
        return db.query(self.model).filter(Trip.created_at >= since).all()

    def count_for_vehicle(self, db: Session, *, vehicle_id: int) -> int:
        return db.query(self.model).filter(Trip.vehicle_id == vehicle_id).count()

    def get_dispatched_for_vehicle(self, db: Session, *, vehicle_id: int) -> Optional[Trip]:
        return db.query(self.model).filter(
            Trip.vehicle_id == vehicle_id,
            Trip.status == TripStatus.dispatched.value,
        ).first()

    def has_dispatched_for_vehicle(self, db: Session, *, vehicle_id: int) -> bool:
        return self.get_dispatched_for_vehicle(db, vehicle_id=vehicle_id) is not None

    def has_dispatched_for_driver(self, db: Session, *, driver_id: int) -> bool:
        return db.query(self.model).filter(
            Trip.driver_id == driver_id,
            Trip.status == TripStatus.dispatched.value,
        ).first() is not None

# Create a singleton instance
trip = CRUDTrip(Trip)
