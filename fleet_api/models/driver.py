from sqlalchemy import Column, String, Date, DateTime, Integer
from sqlalchemy.orm import relationship
from fleet_api.db.base_class import Base
from datetime import datetime

class Driver(Base):
    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    license_number = Column(String, nullable=False, unique=True)
    license_category = Column(String, nullable=True)
    expiry_date = Column(Date, nullable=False)
    safety_score = Column(Integer, nullable=False, default=100)  # 0-100
    region = Column(String, nullable=False, default="Main")
    status = Column(String, nullable=False, default="Off Duty")  # Available, On Duty, Off Duty, Suspended
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    trips = relationship("Trip", back_populates="driver")

    def __repr__(self):
        return f"<Driver {self.name} ({self.license_number})>"
