from sqlalchemy import Column, String, Date, DateTime, Integer, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from fleet_api.db.base_class import Base
from datetime import datetime

class MaintenanceLog(Base):
    __tablename__ = "maintenance_logs"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    service_type = Column(String, nullable=False)
    cost = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    service_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    vehicle = relationship("Vehicle", back_populates="maintenance_logs")

    def __repr__(self):
        return f"<MaintenanceLog {self.service_type} vehicle={self.vehicle_id}>"
