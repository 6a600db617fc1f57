from typing import List, Optional
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from fleet_api.crud.base import CRUDBase
from fleet_api.models.vehicle import Vehicle
from fleet_api.schemas.vehicle import VehicleCreate, VehicleUpdate, VehicleStatus

class CRUDVehicle(CRUDBase[Vehicle, VehicleCreate, VehicleUpdate]):
    def get_by_license_plate(
        self, db: Session, *, license_plate: str
    ) -> Optional[Vehicle]:
        return db.query(Vehicle).filter(
            Vehicle.license_plate == license_plate.upper()
        ).first()

    def search(
        self,
        db: Session,
        *,
        region: Optional[str] = None,
        vehicle_type: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Vehicle]:
        query = db.query(self.model)
        if region:
            query = query.filter(Vehicle.region == region)
        if vehicle_type:
            query = query.filter(Vehicle.vehicle_type == vehicle_type)
        if status:
            query = query.filter(Vehicle.status == status)
        if search:
            term = f"%{search.lower()}%"
            query = query.filter(or_(
                func.lower(Vehicle.model).like(term),
                func.lower(Vehicle.license_plate).like(term),
                func.lower(Vehicle.region).like(term),
                func.lower(Vehicle.status).like(term),
            ))
        return query.order_by(Vehicle.id).all()

    def get_by_status(
        self, db: Session, *, status: VehicleStatus, limit: Optional[int] = None
    ) -> List[Vehicle]:
        query = db.query(self.model).filter(Vehicle.status == status.value).order_by(Vehicle.id)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

# Create a singleton instance
vehicle = CRUDVehicle(Vehicle)
