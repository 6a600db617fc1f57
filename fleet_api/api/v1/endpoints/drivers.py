from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from fleet_api import crud, schemas
from fleet_api.api import deps
from fleet_api.core.errors import InvalidStateError, ValidationFailure
from fleet_api.services import analytics

router = APIRouter(prefix="/drivers", tags=["drivers"])

def _get_driver_or_404(db: Session, driver_id: int):
    driver = crud.driver.get(db, id=driver_id)
    if not driver:
        raise HTTPException(
            status_code=404,
            detail="The driver with this ID does not exist in the system",
        )
    return driver

def _matches(driver: schemas.DriverWithStats, term: str) -> bool:
    fields = (driver.name, driver.license_number, driver.license_category, driver.region, driver.status.value)
    return any(term in value.lower() for value in fields if value)

@router.get("", response_model=List[schemas.DriverWithStats])
def read_drivers(
    db: Session = Depends(deps.get_db),
    region: Optional[str] = None,
    search: Optional[str] = None,
    current_user: deps.CurrentUser = Depends(deps.require("drivers:read")),
):
    """
    Retrieve drivers ordered by name, with their operational trip totals.
    """
    drivers = crud.driver.get_multi_by_name(db, region=region)
    trips = crud.trip.get_by_statuses(
        db, statuses=(schemas.TripStatus.dispatched, schemas.TripStatus.completed)
    )
    stats = analytics.driver_trip_stats(trips)

    result = []
    for driver in drivers:
        entry = stats.get(driver.id, {"total": 0, "completed": 0, "distance": 0.0})
        result.append(schemas.DriverWithStats(
            **schemas.Driver.model_validate(driver).model_dump(),
            total_trips=entry["total"],
            completed_trips=entry["completed"],
            total_distance=round(entry["distance"], 2),
            completion_rate=analytics.completion_rate(entry["completed"], entry["total"]),
        ))

    if search:
        term = search.lower()
        result = [d for d in result if _matches(d, term)]
    return result

@router.post("", response_model=schemas.Driver, status_code=status.HTTP_201_CREATED)
def create_driver(
    *,
    db: Session = Depends(deps.get_db),
    driver_in: schemas.DriverCreate,
    current_user: deps.CurrentUser = Depends(deps.require("drivers:create")),
):
    """
    Create new driver. New drivers start Off Duty.
    """
    driver = crud.driver.get_by_license(db, license_number=driver_in.license_number)
    if driver:
        raise HTTPException(
            status_code=400,
            detail="The driver with this license number already exists in the system.",
        )
    data = driver_in.model_dump()
    data["status"] = schemas.DriverStatus.off_duty.value
    return crud.driver.create(db=db, obj_in=data)

@router.get("/{driver_id}", response_model=schemas.Driver)
def read_driver(
    driver_id: int,
    db: Session = Depends(deps.get_db),
    current_user: deps.CurrentUser = Depends(deps.require("drivers:read")),
):
    """
    Get driver by ID.
    """
    return _get_driver_or_404(db, driver_id)

@router.put("/{driver_id}", response_model=schemas.Driver)
def update_driver(
    *,
    db: Session = Depends(deps.get_db),
    driver_id: int,
    driver_in: schemas.DriverUpdate,
    current_user: deps.CurrentUser = Depends(deps.require("drivers:update")),
):
    """
    Update a driver's license, score and region. Status has its own endpoint.
    """
    driver = _get_driver_or_404(db, driver_id)

    # Check if license number is being updated to an existing one
    if driver_in.license_number and driver_in.license_number != driver.license_number:
        existing_driver = crud.driver.get_by_license(db, license_number=driver_in.license_number)
        if existing_driver and existing_driver.id != driver_id:
            raise HTTPException(
                status_code=400,
                detail="The driver with this license number already exists in the system.",
            )

    return crud.driver.update(db=db, db_obj=driver, obj_in=driver_in)

@router.patch("/{driver_id}/status", response_model=schemas.Driver)
def update_driver_status(
    *,
    db: Session = Depends(deps.get_db),
    driver_id: int,
    status_in: schemas.DriverStatusUpdate,
    current_user: deps.CurrentUser = Depends(deps.require("drivers:status")),
):
    """
    Set a driver Available, Off Duty or Suspended.
    """
    if status_in.status not in schemas.MANUAL_DRIVER_STATUSES:
        allowed = ", ".join(s.value for s in schemas.MANUAL_DRIVER_STATUSES)
        raise ValidationFailure(f"Invalid status. Must be one of: {allowed}")

    driver = _get_driver_or_404(db, driver_id)
    if crud.trip.has_dispatched_for_driver(db, driver_id=driver_id):
        raise InvalidStateError("Driver is on an active trip; complete or cancel it first")

    return crud.driver.update(db=db, db_obj=driver, obj_in={"status": status_in.status})
