from .vehicle import Vehicle
from .driver import Driver
from .trip import Trip
from .maintenance_log import MaintenanceLog
from .fuel_log import FuelLog
from .profile import Profile

__all__ = [
    'Vehicle',
    'Driver',
    'Trip',
    'MaintenanceLog',
    'FuelLog',
    'Profile',
]
