from pydantic import BaseModel, Field
from datetime import date as date_type, datetime
from typing import Optional

from .vehicle import VehicleSummary

class MaintenanceLogCreate(BaseModel):
    vehicle_id: int
    service_type: str = Field(..., min_length=1, max_length=100)
    cost: float = Field(0, ge=0)
    service_date: date_type

class MaintenanceLogUpdate(BaseModel):
    service_type: Optional[str] = Field(None, min_length=1, max_length=100)
    cost: Optional[float] = Field(None, ge=0)
    service_date: Optional[date_type] = None

class MaintenanceLog(MaintenanceLogCreate):
    id: int
    created_at: datetime
    vehicle: Optional[VehicleSummary] = None

    class Config:
        from_attributes = True

class FuelLogCreate(BaseModel):
    vehicle_id: int
    liters: float = Field(..., gt=0)
    cost: float = Field(0, ge=0)
    date: date_type

class FuelLogUpdate(BaseModel):
    liters: Optional[float] = Field(None, gt=0)
    cost: Optional[float] = Field(None, ge=0)
    date: Optional[date_type] = None

class FuelLog(FuelLogCreate):
    id: int
    created_at: datetime
    vehicle: Optional[VehicleSummary] = None

    class Config:
        from_attributes = True
