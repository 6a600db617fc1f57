from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from fleet_api import crud, schemas
from fleet_api.api import deps
from fleet_api.core.errors import NotFoundError

router = APIRouter(prefix="/fuel", tags=["fuel"])

def _get_log_or_404(db: Session, log_id: int):
    log = crud.fuel_log.get(db, id=log_id)
    if not log:
        raise NotFoundError("Fuel log not found")
    return log

@router.get("", response_model=List[schemas.FuelLog])
def read_fuel_logs(
    db: Session = Depends(deps.get_db),
    search: Optional[str] = None,
    current_user: deps.CurrentUser = Depends(deps.require("fuel:read")),
):
    """
    Retrieve fuel logs, newest first. `search` matches vehicle model and plate.
    """
    logs = crud.fuel_log.get_multi_detailed(db)
    if search:
        term = search.lower()
        logs = [
            log for log in logs
            if log.vehicle and (term in log.vehicle.model.lower() or term in log.vehicle.license_plate.lower())
        ]
    return logs

@router.post("", response_model=schemas.FuelLog, status_code=status.HTTP_201_CREATED)
def create_fuel_log(
    *,
    db: Session = Depends(deps.get_db),
    log_in: schemas.FuelLogCreate,
    current_user: deps.CurrentUser = Depends(deps.require("fuel:write")),
):
    """
    Record a refuel for an existing vehicle.
    """
    if not crud.vehicle.get(db, id=log_in.vehicle_id):
        raise NotFoundError("Vehicle not found")
    return crud.fuel_log.create(db=db, obj_in=log_in)

@router.put("/{log_id}", response_model=schemas.FuelLog)
def update_fuel_log(
    *,
    db: Session = Depends(deps.get_db),
    log_id: int,
    log_in: schemas.FuelLogUpdate,
    current_user: deps.CurrentUser = Depends(deps.require("fuel:write")),
):
    log = _get_log_or_404(db, log_id)
    return crud.fuel_log.update(db=db, db_obj=log, obj_in=log_in)

@router.delete("/{log_id}", response_model=schemas.MessageResponse)
def delete_fuel_log(
    *,
    db: Session = Depends(deps.get_db),
    log_id: int,
    current_user: deps.CurrentUser = Depends(deps.require("fuel:write")),
):
    _get_log_or_404(db, log_id)
    crud.fuel_log.remove(db=db, id=log_id)
    return {"message": "Fuel log deleted"}
