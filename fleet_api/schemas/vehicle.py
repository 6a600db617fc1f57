from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional
from enum import Enum

class VehicleStatus(str, Enum):
    available = "Available"
    on_trip = "On Trip"
    in_shop = "In Shop"
    retired = "Retired"

class VehicleBase(BaseModel):
    model: str = Field(..., min_length=1, max_length=100)
    license_plate: str = Field(..., min_length=2, max_length=20)
    max_capacity: float = Field(..., gt=0, description="Capacity in kg")
    odometer: float = Field(0, ge=0, description="Odometer in km")
    acquisition_cost: float = Field(0, ge=0)
    region: str = "Main"
    vehicle_type: str = "Truck"

    @field_validator('license_plate')
    def validate_license_plate(cls, v):
        # Plates are stored upper-cased so uniqueness is case-insensitive
        if not v.replace(" ", "").replace("-", "").isalnum():
            raise ValueError("License plate must be alphanumeric")
        return v.strip().upper()

class VehicleCreate(VehicleBase):
    pass

class VehicleUpdate(BaseModel):
    model: Optional[str] = Field(None, min_length=1, max_length=100)
    license_plate: Optional[str] = Field(None, min_length=2, max_length=20)
    max_capacity: Optional[float] = Field(None, gt=0)
    odometer: Optional[float] = Field(None, ge=0)
    acquisition_cost: Optional[float] = Field(None, ge=0)
    region: Optional[str] = None
    vehicle_type: Optional[str] = None
    status: Optional[VehicleStatus] = None

    @field_validator('license_plate')
    def validate_license_plate(cls, v):
        if v and not v.replace(" ", "").replace("-", "").isalnum():
            raise ValueError("License plate must be alphanumeric")
        return v.strip().upper() if v else v

class Vehicle(VehicleBase):
    id: int
    status: VehicleStatus
    current_lat: Optional[float] = None
    current_lng: Optional[float] = None
    last_updated: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class VehicleSummary(BaseModel):
    model: str
    license_plate: str

    class Config:
        from_attributes = True

class VehicleAnalytics(BaseModel):
    vehicle_id: int
    revenue: float
    fuel_cost: float
    maintenance_cost: float
    acquisition_cost: float
    roi: float
