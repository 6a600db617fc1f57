from .base import CRUDBase
from .crud_driver import driver
from .crud_vehicle import vehicle
from .crud_trip import trip
from .crud_log import maintenance_log, fuel_log
from .crud_profile import profile

__all__ = [
    'CRUDBase',
    'driver',
    'vehicle',
    'trip',
    'maintenance_log',
    'fuel_log',
    'profile',
]
