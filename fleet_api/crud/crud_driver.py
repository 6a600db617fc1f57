from typing import List, Optional
from sqlalchemy.orm import Session

from fleet_api.crud.base import CRUDBase
from fleet_api.models.driver import Driver
from fleet_api.schemas.driver import DriverCreate, DriverUpdate

class CRUDDriver(CRUDBase[Driver, DriverCreate, DriverUpdate]):
    def get_by_license(self, db: Session, *, license_number: str) -> Optional[Driver]:
        return db.query(Driver).filter(Driver.license_number == license_number).first()

    def get_multi_by_name(
        self, db: Session, *, region: Optional[str] = None
    ) -> List[Driver]:
        query = db.query(self.model)
        if region:
            query = query.filter(Driver.region == region)
        return query.order_by(Driver.name.asc()).all()

# Create a singleton instance
driver = CRUDDriver(Driver)
