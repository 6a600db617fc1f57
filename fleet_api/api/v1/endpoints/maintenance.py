from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from fleet_api import crud, schemas
from fleet_api.api import deps
from fleet_api.core.errors import NotFoundError
from fleet_api.services import maintenance_service

router = APIRouter(prefix="/maintenance", tags=["maintenance"])

def _get_log_or_404(db: Session, log_id: int):
    log = crud.maintenance_log.get(db, id=log_id)
    if not log:
        raise NotFoundError("Maintenance log not found")
    return log

@router.get("", response_model=List[schemas.MaintenanceLog])
def read_maintenance_logs(
    db: Session = Depends(deps.get_db),
    type: Optional[str] = None,
    search: Optional[str] = None,
    current_user: deps.CurrentUser = Depends(deps.require("maintenance:read")),
):
    """
    Retrieve maintenance logs, most recent service first.
    """
    logs = crud.maintenance_log.get_multi_detailed(
        db, service_type=type if type and type != "All" else None
    )
    if search:
        term = search.lower()
        logs = [
            log for log in logs
            if term in log.service_type.lower()
            or (log.vehicle and (term in log.vehicle.model.lower() or term in log.vehicle.license_plate.lower()))
        ]
    return logs

@router.post("", response_model=schemas.MaintenanceLog, status_code=status.HTTP_201_CREATED)
def create_maintenance_log(
    *,
    db: Session = Depends(deps.get_db),
    log_in: schemas.MaintenanceLogCreate,
    current_user: deps.CurrentUser = Depends(deps.require("maintenance:write")),
):
    """
    Log a service and send the vehicle to the shop.
    """
    return maintenance_service.log_maintenance(db, log_in)

@router.put("/{log_id}", response_model=schemas.MaintenanceLog)
def update_maintenance_log(
    *,
    db: Session = Depends(deps.get_db),
    log_id: int,
    log_in: schemas.MaintenanceLogUpdate,
    current_user: deps.CurrentUser = Depends(deps.require("maintenance:write")),
):
    log = _get_log_or_404(db, log_id)
    return crud.maintenance_log.update(db=db, db_obj=log, obj_in=log_in)

@router.delete("/{log_id}", response_model=schemas.MessageResponse)
def delete_maintenance_log(
    *,
    db: Session = Depends(deps.get_db),
    log_id: int,
    current_user: deps.CurrentUser = Depends(deps.require("maintenance:write")),
):
    _get_log_or_404(db, log_id)
    crud.maintenance_log.remove(db=db, id=log_id)
    return {"message": "Maintenance log deleted"}
