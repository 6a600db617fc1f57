from typing import List, Optional
from sqlalchemy.orm import Session, joinedload

from fleet_api.crud.base import CRUDBase
from fleet_api.models.maintenance_log import MaintenanceLog
from fleet_api.models.fuel_log import FuelLog
from fleet_api.schemas.logs import (
    MaintenanceLogCreate, MaintenanceLogUpdate, FuelLogCreate, FuelLogUpdate
)

class CRUDMaintenanceLog(CRUDBase[MaintenanceLog, MaintenanceLogCreate, MaintenanceLogUpdate]):
    def get_multi_detailed(
        self, db: Session, *, service_type: Optional[str] = None
    ) -> List[MaintenanceLog]:
        query = (
            db.query(self.model)
            .options(joinedload(MaintenanceLog.vehicle))
            .order_by(MaintenanceLog.service_date.desc(), MaintenanceLog.id.desc())
        )
        if service_type:
            query = query.filter(MaintenanceLog.service_type == service_type)
        return query.all()

class CRUDFuelLog(CRUDBase[FuelLog, FuelLogCreate, FuelLogUpdate]):
    def get_multi_detailed(self, db: Session) -> List[FuelLog]:
        return (
            db.query(self.model)
            .options(joinedload(FuelLog.vehicle))
            .order_by(FuelLog.date.desc(), FuelLog.id.desc())
            .all()
        )

# Create singleton instances
maintenance_log = CRUDMaintenanceLog(MaintenanceLog)
fuel_log = CRUDFuelLog(FuelLog)
