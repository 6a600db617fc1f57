from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from fleet_api import crud, schemas
from fleet_api.api import deps
from fleet_api.core.errors import InvalidStateError, ValidationFailure
from fleet_api.services import analytics

router = APIRouter(prefix="/vehicles", tags=["vehicles"])

def _get_vehicle_or_404(db: Session, vehicle_id: int):
    vehicle = crud.vehicle.get(db, id=vehicle_id)
    if not vehicle:
        raise HTTPException(
            status_code=404,
            detail="The vehicle with this ID does not exist in the system",
        )
    return vehicle

@router.get("", response_model=List[schemas.Vehicle])
def read_vehicles(
    db: Session = Depends(deps.get_db),
    region: Optional[str] = None,
    vehicle_type: Optional[str] = None,
    status: Optional[schemas.VehicleStatus] = None,
    search: Optional[str] = None,
    current_user: deps.CurrentUser = Depends(deps.require("vehicles:read")),
):
    """
    Retrieve vehicles, optionally filtered by region, type and status.
    `search` matches model, license plate, region or status.
    """
    return crud.vehicle.search(
        db,
        region=region,
        vehicle_type=vehicle_type,
        status=status.value if status else None,
        search=search,
    )

@router.post("", response_model=schemas.Vehicle, status_code=status.HTTP_201_CREATED)
def create_vehicle(
    *,
    db: Session = Depends(deps.get_db),
    vehicle_in: schemas.VehicleCreate,
    current_user: deps.CurrentUser = Depends(deps.require("vehicles:create")),
):
    """
    Create new vehicle. New vehicles start Available.
    """
    vehicle = crud.vehicle.get_by_license_plate(db, license_plate=vehicle_in.license_plate)
    if vehicle:
        raise HTTPException(
            status_code=400,
            detail="A vehicle with this license plate already exists in the system.",
        )
    data = vehicle_in.model_dump()
    data["status"] = schemas.VehicleStatus.available.value
    return crud.vehicle.create(db=db, obj_in=data)

@router.get("/{vehicle_id}", response_model=schemas.Vehicle)
def read_vehicle(
    vehicle_id: int,
    db: Session = Depends(deps.get_db),
    current_user: deps.CurrentUser = Depends(deps.require("vehicles:read")),
):
    """
    Get vehicle by ID.
    """
    return _get_vehicle_or_404(db, vehicle_id)

@router.put("/{vehicle_id}", response_model=schemas.Vehicle)
def update_vehicle(
    *,
    db: Session = Depends(deps.get_db),
    vehicle_id: int,
    vehicle_in: schemas.VehicleUpdate,
    current_user: deps.CurrentUser = Depends(deps.require("vehicles:update")),
):
    """
    Update a vehicle.

    On Trip is only ever set by dispatching a trip, and a vehicle held by a
    dispatched trip keeps its status until the trip is completed or cancelled.
    Its capacity cannot drop below that trip's cargo. Odometers never go back.
    """
    vehicle = _get_vehicle_or_404(db, vehicle_id)

    # Check if license plate is being updated to an existing one
    if vehicle_in.license_plate and vehicle_in.license_plate != vehicle.license_plate:
        existing_vehicle = crud.vehicle.get_by_license_plate(db, license_plate=vehicle_in.license_plate)
        if existing_vehicle and existing_vehicle.id != vehicle_id:
            raise HTTPException(
                status_code=400,
                detail="A vehicle with this license plate already exists in the system.",
            )

    if vehicle_in.odometer is not None and vehicle_in.odometer < (vehicle.odometer or 0):
        raise ValidationFailure("Odometer cannot be decreased")

    active_trip = crud.trip.get_dispatched_for_vehicle(db, vehicle_id=vehicle_id)
    if vehicle_in.status is not None and vehicle_in.status.value != vehicle.status:
        if vehicle_in.status == schemas.VehicleStatus.on_trip:
            raise InvalidStateError("Vehicles are put On Trip by dispatching a trip")
        if active_trip:
            raise InvalidStateError("Vehicle is On Trip; complete or cancel its trip first")
    if active_trip and vehicle_in.max_capacity is not None:
        if float(active_trip.cargo_weight) > vehicle_in.max_capacity:
            raise ValidationFailure("Capacity is below the cargo of the vehicle's dispatched trip")

    return crud.vehicle.update(db=db, db_obj=vehicle, obj_in=vehicle_in)

@router.patch("/{vehicle_id}/retire", response_model=schemas.Vehicle)
def retire_vehicle(
    *,
    db: Session = Depends(deps.get_db),
    vehicle_id: int,
    current_user: deps.CurrentUser = Depends(deps.require("vehicles:retire")),
):
    """
    Take a vehicle out of the active fleet.
    """
    vehicle = _get_vehicle_or_404(db, vehicle_id)
    if crud.trip.has_dispatched_for_vehicle(db, vehicle_id=vehicle_id):
        raise InvalidStateError("Vehicle is On Trip; complete or cancel its trip first")
    return crud.vehicle.update(db=db, db_obj=vehicle, obj_in={"status": schemas.VehicleStatus.retired})

@router.delete("/{vehicle_id}", response_model=schemas.MessageResponse)
def delete_vehicle(
    *,
    db: Session = Depends(deps.get_db),
    vehicle_id: int,
    current_user: deps.CurrentUser = Depends(deps.require("vehicles:delete")),
):
    """
    Delete a vehicle together with its maintenance and fuel logs.
    """
    _get_vehicle_or_404(db, vehicle_id)

    # Check if vehicle is referenced by any trips
    if crud.trip.count_for_vehicle(db, vehicle_id=vehicle_id):
        raise HTTPException(
            status_code=400,
            detail="Cannot delete vehicle with trips. Delete the trips or retire the vehicle instead.",
        )

    crud.vehicle.remove(db=db, id=vehicle_id)
    return {"message": "Vehicle deleted successfully"}

@router.get("/{vehicle_id}/analytics", response_model=schemas.VehicleAnalytics)
def read_vehicle_analytics(
    vehicle_id: int,
    db: Session = Depends(deps.get_db),
    current_user: deps.CurrentUser = Depends(deps.require("vehicles:analytics")),
):
    """
    Revenue, operating cost and ROI of one vehicle.
    """
    vehicle = _get_vehicle_or_404(db, vehicle_id)
    return analytics.vehicle_roi(vehicle, vehicle.trips, vehicle.fuel_logs, vehicle.maintenance_logs)
