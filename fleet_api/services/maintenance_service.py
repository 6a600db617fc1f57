import logging
from sqlalchemy.orm import Session

from fleet_api import crud
from fleet_api.core.errors import InvalidStateError, NotFoundError
from fleet_api.db.session import atomic
from fleet_api.models.maintenance_log import MaintenanceLog
from fleet_api.schemas.logs import MaintenanceLogCreate
from fleet_api.schemas.vehicle import VehicleStatus

logger = logging.getLogger(__name__)

def log_maintenance(db: Session, log_in: MaintenanceLogCreate) -> MaintenanceLog:
    """
    Record a service and send the vehicle to the shop, in one commit.

    A vehicle held by a dispatched trip cannot be logged into the shop; a Retired vehicle
    gets the log but stays Retired.
    """
    with atomic(db):
        vehicle = crud.vehicle.get(db, log_in.vehicle_id, for_update=True)
        if not vehicle:
            raise NotFoundError("Vehicle not found")
        if crud.trip.has_dispatched_for_vehicle(db, vehicle_id=vehicle.id):
            raise InvalidStateError("Vehicle is On Trip; complete or cancel its trip first")
        log = crud.maintenance_log.create(db, obj_in=log_in, commit=False)
        if vehicle.status != VehicleStatus.retired.value:
            vehicle.status = VehicleStatus.in_shop.value
    db.refresh(log)
    logger.info(f"Maintenance '{log.service_type}' logged for vehicle {vehicle.id}, status {vehicle.status}")
    return log
