from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from enum import Enum

from .vehicle import VehicleSummary
from .driver import DriverSummary

class TripStatus(str, Enum):
    draft = "Draft"
    dispatched = "Dispatched"
    completed = "Completed"
    cancelled = "Cancelled"

ACTIVE_TRIP_STATUSES = (TripStatus.draft, TripStatus.dispatched)
TERMINAL_TRIP_STATUSES = (TripStatus.completed, TripStatus.cancelled)

class TripCreate(BaseModel):
    vehicle_id: int
    driver_id: int
    cargo_weight: float = Field(0, ge=0, description="Cargo weight in kg")
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    start_odometer: Optional[float] = Field(None, ge=0)
    revenue: Optional[float] = Field(None, ge=0)

class TripUpdate(BaseModel):
    vehicle_id: Optional[int] = None
    driver_id: Optional[int] = None
    cargo_weight: Optional[float] = Field(None, ge=0)
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    start_odometer: Optional[float] = Field(None, ge=0)
    revenue: Optional[float] = Field(None, ge=0)

class TripComplete(BaseModel):
    end_odometer: float = Field(..., ge=0)
    revenue: Optional[float] = Field(None, ge=0)

class Trip(BaseModel):
    id: int
    vehicle_id: int
    driver_id: int
    cargo_weight: float
    revenue: float
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    start_odometer: float
    end_odometer: Optional[float] = None
    distance: Optional[float] = None
    status: TripStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class TripDetail(Trip):
    vehicle: Optional[VehicleSummary] = None
    driver: Optional[DriverSummary] = None
