from sqlalchemy import Column, Date, DateTime, Integer, Float, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from fleet_api.db.base_class import Base
from datetime import datetime

class FuelLog(Base):
    __tablename__ = "fuel_logs"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    liters = Column(Float, nullable=False)
    cost = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    vehicle = relationship("Vehicle", back_populates="fuel_logs")

    def __repr__(self):
        return f"<FuelLog {self.liters}L vehicle={self.vehicle_id}>"
