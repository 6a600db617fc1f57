from .auth import (
    Role, RegisterRequest, LoginRequest, ForgotPasswordRequest, UserOut,
    RegisterResponse, LoginResponse, ProfileResponse, MessageResponse
)
from .vehicle import Vehicle, VehicleCreate, VehicleUpdate, VehicleStatus, VehicleSummary, VehicleAnalytics
from .driver import (
    Driver, DriverCreate, DriverUpdate, DriverStatus, DriverStatusUpdate, DriverWithStats,
    DriverSummary, MANUAL_DRIVER_STATUSES
)
from .trip import (
    Trip, TripDetail, TripCreate, TripUpdate, TripComplete, TripStatus,
    ACTIVE_TRIP_STATUSES, TERMINAL_TRIP_STATUSES
)
from .logs import (
    MaintenanceLog, MaintenanceLogCreate, MaintenanceLogUpdate,
    FuelLog, FuelLogCreate, FuelLogUpdate
)
from .analytics import (
    DashboardMetrics, DailyTripCount, MonthlyFinancials, DriverMetric,
    VehicleROI, RegionalMetric, BusinessIntelligence, FinancialReport
)

__all__ = [
    'Role', 'RegisterRequest', 'LoginRequest', 'ForgotPasswordRequest', 'UserOut',
    'RegisterResponse', 'LoginResponse', 'ProfileResponse', 'MessageResponse',
    'Vehicle', 'VehicleCreate', 'VehicleUpdate', 'VehicleStatus', 'VehicleSummary', 'VehicleAnalytics',
    'Driver', 'DriverCreate', 'DriverUpdate', 'DriverStatus', 'DriverStatusUpdate', 'DriverWithStats',
    'DriverSummary', 'MANUAL_DRIVER_STATUSES',
    'Trip', 'TripDetail', 'TripCreate', 'TripUpdate', 'TripComplete', 'TripStatus',
    'ACTIVE_TRIP_STATUSES', 'TERMINAL_TRIP_STATUSES',
    'MaintenanceLog', 'MaintenanceLogCreate', 'MaintenanceLogUpdate',
    'FuelLog', 'FuelLogCreate', 'FuelLogUpdate',
    'DashboardMetrics', 'DailyTripCount', 'MonthlyFinancials', 'DriverMetric',
    'VehicleROI', 'RegionalMetric', 'BusinessIntelligence', 'FinancialReport',
]
