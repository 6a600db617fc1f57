from sqlalchemy import Column, String, DateTime, Integer, Float, Numeric
from sqlalchemy.orm import relationship
from fleet_api.db.base_class import Base
from datetime import datetime

class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True)
    model = Column(String, nullable=False)
    license_plate = Column(String, unique=True, nullable=False, index=True)
    max_capacity = Column(Numeric(12, 2, asdecimal=False), nullable=False)  # in kg
    odometer = Column(Float, nullable=False, default=0)  # in km
    acquisition_cost = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    region = Column(String, nullable=False, default="Main")
    vehicle_type = Column(String, nullable=False, default="Truck")
    status = Column(String, nullable=False, default="Available", index=True)  # Available, On Trip, In Shop, Retired

    # Last known position, written by the position simulator
    current_lat = Column(Float, nullable=True)
    current_lng = Column(Float, nullable=True)
    last_updated = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    trips = relationship("Trip", back_populates="vehicle")
    maintenance_logs = relationship("MaintenanceLog", back_populates="vehicle", cascade="all, delete-orphan")
    fuel_logs = relationship("FuelLog", back_populates="vehicle", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Vehicle {self.model} ({self.license_plate})>"
