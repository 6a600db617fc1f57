from sqlalchemy import Column, String, DateTime, Integer, Float, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from fleet_api.db.base_class import Base
from datetime import datetime

class Trip(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=False, index=True)
    cargo_weight = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)  # in kg
    revenue = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    start_location = Column(String, nullable=True)
    end_location = Column(String, nullable=True)
    start_odometer = Column(Float, nullable=False, default=0)
    end_odometer = Column(Float, nullable=True)  # set on completion only
    status = Column(String, nullable=False, default="Draft", index=True)  # Draft, Dispatched, Completed, Cancelled
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    vehicle = relationship("Vehicle", back_populates="trips")
    driver = relationship("Driver", back_populates="trips")

    @property
    def distance(self):
        """Distance travelled in km, known once the trip is completed."""
        if self.end_odometer is None:
            return None
        return self.end_odometer - (self.start_odometer or 0)

    def __repr__(self):
        return f"<Trip {self.id} {self.status}>"
