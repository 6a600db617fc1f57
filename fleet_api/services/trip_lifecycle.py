"""
Trip lifecycle: Draft -> Dispatched -> Completed, with Cancelled reachable
from Draft and Dispatched.

Each transition validates everything before the first write and then stages
the trip, vehicle and driver changes in one session, committed once through
``atomic``. Rows taking part in a transition are read ``FOR UPDATE`` so two
concurrent dispatches of the same vehicle or driver serialize on the database.
"""
import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from fleet_api import crud
from fleet_api.core.errors import InvalidStateError, NotFoundError, ValidationFailure
from fleet_api.db.session import atomic
from fleet_api.models.driver import Driver
from fleet_api.models.trip import Trip
from fleet_api.models.vehicle import Vehicle
from fleet_api.schemas.driver import DriverStatus
from fleet_api.schemas.trip import TripCreate, TripUpdate, TripStatus, TERMINAL_TRIP_STATUSES
from fleet_api.schemas.vehicle import VehicleStatus

logger = logging.getLogger(__name__)

# Trip columns that may never be cleared by an update
_REQUIRED_TRIP_FIELDS = ("vehicle_id", "driver_id", "cargo_weight", "start_odometer", "revenue")


def _today() -> date:
    return datetime.utcnow().date()


def _load_trip(db: Session, trip_id: int) -> Trip:
    trip = crud.trip.get(db, trip_id, for_update=True)
    if not trip:
        raise NotFoundError("Trip not found")
    return trip


def _load_vehicle(db: Session, vehicle_id: int) -> Vehicle:
    vehicle = crud.vehicle.get(db, vehicle_id, for_update=True)
    if not vehicle:
        raise NotFoundError("Vehicle not found")
    return vehicle


def _load_driver(db: Session, driver_id: int) -> Driver:
    driver = crud.driver.get(db, driver_id, for_update=True)
    if not driver:
        raise NotFoundError("Driver not found")
    return driver


def _release(db: Session, trip: Trip) -> None:
    """Hand the trip's vehicle and driver back to the pool."""
    vehicle = crud.vehicle.get(db, trip.vehicle_id, for_update=True)
    if vehicle:
        vehicle.status = VehicleStatus.available.value
    driver = crud.driver.get(db, trip.driver_id, for_update=True)
    if driver:
        driver.status = DriverStatus.available.value


def create_trip(db: Session, trip_in: TripCreate) -> Trip:
    """Insert a new trip in Draft. Vehicle and driver must exist."""
    with atomic(db):
        _load_vehicle(db, trip_in.vehicle_id)
        _load_driver(db, trip_in.driver_id)
        trip = crud.trip.create(
            db,
            obj_in={
                "vehicle_id": trip_in.vehicle_id,
                "driver_id": trip_in.driver_id,
                "cargo_weight": trip_in.cargo_weight,
                "start_location": trip_in.start_location,
                "end_location": trip_in.end_location,
                "start_odometer": trip_in.start_odometer or 0,
                "revenue": trip_in.revenue or 0,
                "status": TripStatus.draft.value,
            },
            commit=False,
        )
    db.refresh(trip)
    logger.info(f"Trip {trip.id} drafted for vehicle {trip.vehicle_id} and driver {trip.driver_id}")
    return trip


def dispatch_trip(db: Session, trip_id: int, *, today: Optional[date] = None) -> Trip:
    """
    Move a Draft trip to Dispatched, marking the vehicle On Trip and the
    driver On Duty.

    Raises:
        NotFoundError: trip, driver or vehicle does not exist
        InvalidStateError: trip is not Draft, driver already On Duty, vehicle not Available
        ValidationFailure: driver suspended or license expired, cargo over capacity
    """
    today = today or _today()
    with atomic(db):
        trip = _load_trip(db, trip_id)
        if trip.status != TripStatus.draft.value:
            raise InvalidStateError("Only draft trips can be dispatched")

        driver = _load_driver(db, trip.driver_id)
        if driver.status == DriverStatus.suspended.value:
            raise ValidationFailure(f"Driver is {driver.status} and cannot be dispatched")
        if driver.status == DriverStatus.on_duty.value:
            raise InvalidStateError("Driver is already On Duty on another trip")
        # A license expiring today is still valid today
        if driver.expiry_date < today:
            raise ValidationFailure("Driver license expired")

        vehicle = _load_vehicle(db, trip.vehicle_id)
        if vehicle.status != VehicleStatus.available.value:
            raise InvalidStateError(f"Vehicle is {vehicle.status}, must be Available")
        if float(trip.cargo_weight) > float(vehicle.max_capacity):
            raise ValidationFailure("Cargo weight exceeds vehicle capacity")

        trip.status = TripStatus.dispatched.value
        vehicle.status = VehicleStatus.on_trip.value
        driver.status = DriverStatus.on_duty.value
    db.refresh(trip)
    logger.info(f"Trip {trip.id} dispatched: vehicle {trip.vehicle_id} On Trip, driver {trip.driver_id} On Duty")
    return trip


def complete_trip(
    db: Session, trip_id: int, end_odometer: float, revenue: Optional[float] = None
) -> Trip:
    """
    Close a Dispatched trip. The vehicle's odometer is set to ``end_odometer``
    and both vehicle and driver become Available again.
    """
    with atomic(db):
        trip = _load_trip(db, trip_id)
        if trip.status != TripStatus.dispatched.value:
            raise InvalidStateError("Only dispatched trips can be completed")
        if end_odometer < (trip.start_odometer or 0):
            raise ValidationFailure("End odometer cannot be less than start odometer")

        vehicle = _load_vehicle(db, trip.vehicle_id)
        driver = _load_driver(db, trip.driver_id)

        trip.status = TripStatus.completed.value
        trip.end_odometer = end_odometer
        if revenue is not None:
            trip.revenue = revenue
        vehicle.status = VehicleStatus.available.value
        vehicle.odometer = end_odometer
        driver.status = DriverStatus.available.value
    db.refresh(trip)
    logger.info(f"Trip {trip.id} completed: {trip.distance} km, revenue {trip.revenue}")
    return trip


def cancel_trip(db: Session, trip_id: int) -> Trip:
    """Cancel a Draft or Dispatched trip; a Dispatched one releases its vehicle and driver."""
    with atomic(db):
        trip = _load_trip(db, trip_id)
        if trip.status in [s.value for s in TERMINAL_TRIP_STATUSES]:
            raise InvalidStateError("Completed or already cancelled trips cannot be cancelled")
        was_dispatched = trip.status == TripStatus.dispatched.value
        trip.status = TripStatus.cancelled.value
        if was_dispatched:
            _release(db, trip)
    db.refresh(trip)
    logger.info(f"Trip {trip.id} cancelled (released resources: {was_dispatched})")
    return trip


def delete_trip(db: Session, trip_id: int) -> None:
    """Remove a trip in any status, releasing its vehicle and driver if it was Dispatched."""
    with atomic(db):
        trip = _load_trip(db, trip_id)
        if trip.status == TripStatus.dispatched.value:
            _release(db, trip)
        crud.trip.remove(db, id=trip.id, commit=False)
    logger.info(f"Trip {trip_id} deleted")


def update_trip(db: Session, trip_id: int, trip_in: TripUpdate) -> Trip:
    """
    Overwrite the mutable fields of a Draft or Dispatched trip.

    Completed and Cancelled trips are read-only. A Dispatched trip keeps its
    vehicle and driver, since those are the rows it holds On Trip / On Duty,
    and its cargo must still fit the vehicle.
    """
    update_data = trip_in.model_dump(exclude_unset=True)
    for field in _REQUIRED_TRIP_FIELDS:
        if field in update_data and update_data[field] is None:
            del update_data[field]

    with atomic(db):
        trip = _load_trip(db, trip_id)
        if trip.status in [s.value for s in TERMINAL_TRIP_STATUSES]:
            raise InvalidStateError(f"{trip.status} trips cannot be edited")
        dispatched = trip.status == TripStatus.dispatched.value

        if "vehicle_id" in update_data and update_data["vehicle_id"] != trip.vehicle_id:
            if dispatched:
                raise InvalidStateError("Cannot change the vehicle of a dispatched trip")
            _load_vehicle(db, update_data["vehicle_id"])
        if "driver_id" in update_data and update_data["driver_id"] != trip.driver_id:
            if dispatched:
                raise InvalidStateError("Cannot change the driver of a dispatched trip")
            _load_driver(db, update_data["driver_id"])
        if dispatched and "cargo_weight" in update_data:
            vehicle = _load_vehicle(db, trip.vehicle_id)
            if float(update_data["cargo_weight"]) > float(vehicle.max_capacity):
                raise ValidationFailure("Cargo weight exceeds vehicle capacity")

        crud.trip.update(db, db_obj=trip, obj_in=update_data, commit=False)
    db.refresh(trip)
    logger.info(f"Trip {trip.id} updated: {sorted(update_data)}")
    return trip
