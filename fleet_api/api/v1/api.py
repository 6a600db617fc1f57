from fastapi import APIRouter

from fleet_api.api.v1.endpoints import analytics, auth, drivers, fuel, maintenance, trips, vehicles

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(auth.router)
api_router.include_router(vehicles.router)
api_router.include_router(drivers.router)
api_router.include_router(trips.router)
api_router.include_router(maintenance.router)
api_router.include_router(fuel.router)
api_router.include_router(analytics.router)
