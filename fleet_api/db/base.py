# Import all the models, so that Base has them before being
# imported by Alembic or used for create_all
from fleet_api.db.base_class import Base  # noqa
from fleet_api.models.vehicle import Vehicle  # noqa
from fleet_api.models.driver import Driver  # noqa
from fleet_api.models.trip import Trip  # noqa
from fleet_api.models.maintenance_log import MaintenanceLog  # noqa
from fleet_api.models.fuel_log import FuelLog  # noqa
from fleet_api.models.profile import Profile  # noqa
