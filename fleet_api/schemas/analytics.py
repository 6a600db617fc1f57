from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional

from .trip import Trip

class DashboardMetrics(BaseModel):
    active_fleet_count: int
    maintenance_alerts_count: int
    utilization_rate: float  # percent, 2 dp
    pending_cargo_count: int
    compliance_alerts_count: int
    total_revenue: float
    total_profit: float

class DailyTripCount(BaseModel):
    date: str  # YYYY-MM-DD
    count: int

class MonthlyFinancials(BaseModel):
    month: str  # YYYY-MM
    revenue: float
    cost: float

class DriverMetric(BaseModel):
    driver_id: int
    name: str
    safety_score: Optional[int] = None
    completion_rate: int
    total_trips: int

class VehicleROI(BaseModel):
    id: int
    model: str
    license_plate: str
    region: Optional[str] = None
    revenue: float
    total_cost: float
    roi: float

class RegionalMetric(BaseModel):
    region: Optional[str] = None
    total_revenue: float
    vehicle_count: int
    efficiency: float

class BusinessIntelligence(BaseModel):
    highest_roi: Optional[VehicleROI] = None
    regional_metrics: List[RegionalMetric]
    vehicle_count: int

class FinancialReport(BaseModel):
    message: str
    timestamp: datetime
    trip_count: int
    report_data: List[Trip]
