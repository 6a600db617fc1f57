from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from fleet_api import crud, schemas
from fleet_api.api import deps
from fleet_api.services import trip_lifecycle

router = APIRouter(prefix="/trips", tags=["trips"])

def _matches(trip, term: str) -> bool:
    fields = [trip.start_location, trip.end_location, trip.status]
    if trip.vehicle is not None:
        fields.extend([trip.vehicle.model, trip.vehicle.license_plate])
    if trip.driver is not None:
        fields.append(trip.driver.name)
    return any(term in value.lower() for value in fields if value)

@router.get("", response_model=List[schemas.TripDetail])
def read_trips(
    db: Session = Depends(deps.get_db),
    status: Optional[str] = None,
    search: Optional[str] = None,
    current_user: deps.CurrentUser = Depends(deps.require("trips:read")),
):
    """
    Retrieve trips, newest first, with the vehicle and driver they use.

    `status` of "All" (or no status) lists every trip. `search` matches
    locations, status, vehicle model and plate, and driver name.
    """
    trips = crud.trip.get_multi_detailed(
        db, status=status if status and status != "All" else None
    )
    if search:
        term = search.lower()
        trips = [t for t in trips if _matches(t, term)]
    return trips

@router.get("/{trip_id}", response_model=schemas.TripDetail)
def read_trip(
    trip_id: int,
    db: Session = Depends(deps.get_db),
    current_user: deps.CurrentUser = Depends(deps.require("trips:read")),
):
    """
    Get trip by ID.
    """
    trip = crud.trip.get(db, id=trip_id)
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")
    return trip

@router.post("", response_model=schemas.Trip, status_code=status.HTTP_201_CREATED)
def create_trip(
    *,
    db: Session = Depends(deps.get_db),
    trip_in: schemas.TripCreate,
    current_user: deps.CurrentUser = Depends(deps.require("trips:create")),
):
    """
    Draft a new trip for an existing vehicle and driver.
    """
    return trip_lifecycle.create_trip(db, trip_in)

@router.put("/{trip_id}", response_model=schemas.Trip)
def update_trip(
    *,
    db: Session = Depends(deps.get_db),
    trip_id: int,
    trip_in: schemas.TripUpdate,
    current_user: deps.CurrentUser = Depends(deps.require("trips:update")),
):
    return trip_lifecycle.update_trip(db, trip_id, trip_in)

@router.delete("/{trip_id}", response_model=schemas.MessageResponse)
def delete_trip(
    *,
    db: Session = Depends(deps.get_db),
    trip_id: int,
    current_user: deps.CurrentUser = Depends(deps.require("trips:delete")),
):
    """
    Delete a trip. A dispatched trip hands its vehicle and driver back first.
    """
    trip_lifecycle.delete_trip(db, trip_id)
    return {"message": "Trip deleted successfully"}

@router.patch("/{trip_id}/dispatch", response_model=schemas.Trip)
def dispatch_trip(
    *,
    db: Session = Depends(deps.get_db),
    trip_id: int,
    current_user: deps.CurrentUser = Depends(deps.require("trips:dispatch")),
):
    """
    Dispatch a draft trip: the vehicle goes On Trip and the driver On Duty.
    """
    return trip_lifecycle.dispatch_trip(db, trip_id)

@router.post("/{trip_id}/complete", response_model=schemas.Trip)
def complete_trip(
    *,
    db: Session = Depends(deps.get_db),
    trip_id: int,
    completion: schemas.TripComplete,
    current_user: deps.CurrentUser = Depends(deps.require("trips:complete")),
):
    """
    Complete a dispatched trip and record the final odometer reading.
    """
    return trip_lifecycle.complete_trip(
        db, trip_id, end_odometer=completion.end_odometer, revenue=completion.revenue
    )

@router.patch("/{trip_id}/cancel", response_model=schemas.Trip)
def cancel_trip(
    *,
    db: Session = Depends(deps.get_db),
    trip_id: int,
    current_user: deps.CurrentUser = Depends(deps.require("trips:cancel")),
):
    return trip_lifecycle.cancel_trip(db, trip_id)
