from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional
from enum import Enum

class DriverStatus(str, Enum):
    available = "Available"
    on_duty = "On Duty"
    off_duty = "Off Duty"
    suspended = "Suspended"

# Statuses a Safety Officer may set by hand; On Duty only comes from dispatch
MANUAL_DRIVER_STATUSES = (DriverStatus.available, DriverStatus.off_duty, DriverStatus.suspended)

class DriverBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    license_number: str = Field(..., min_length=3, max_length=50)
    license_category: Optional[str] = None
    expiry_date: date
    safety_score: int = Field(100, ge=0, le=100)
    region: str = "Main"

class DriverCreate(DriverBase):
    pass

class DriverUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    license_number: Optional[str] = Field(None, min_length=3, max_length=50)
    license_category: Optional[str] = None
    expiry_date: Optional[date] = None
    safety_score: Optional[int] = Field(None, ge=0, le=100)
    region: Optional[str] = None

class DriverStatusUpdate(BaseModel):
    status: DriverStatus

class Driver(DriverBase):
    id: int
    status: DriverStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class DriverWithStats(Driver):
    total_trips: int = 0
    completed_trips: int = 0
    total_distance: float = 0
    completion_rate: int = 0

class DriverSummary(BaseModel):
    name: str

    class Config:
        from_attributes = True
