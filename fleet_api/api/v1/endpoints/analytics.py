from datetime import datetime, timedelta
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fleet_api import crud, schemas
from fleet_api.api import deps
from fleet_api.core.config import settings
from fleet_api.core.errors import NotFoundError
from fleet_api.services import analytics

router = APIRouter(prefix="/analytics", tags=["analytics"])

# Every endpoint re-reads the rows it summarizes; nothing is cached between requests.

@router.get("/dashboard", response_model=schemas.DashboardMetrics)
def read_dashboard(
    db: Session = Depends(deps.get_db),
    current_user: deps.CurrentUser = Depends(deps.require("analytics:read")),
):
    """
    Fleet KPIs: active fleet, shop alerts, utilization, pending cargo,
    expired licenses, revenue and profit.
    """
    return analytics.dashboard_metrics(
        crud.vehicle.get_multi(db),
        crud.driver.get_multi(db),
        crud.trip.get_multi(db),
        crud.fuel_log.get_multi(db),
        crud.maintenance_log.get_multi(db),
        today=datetime.utcnow().date(),
    )

@router.get("/daily-trips", response_model=List[schemas.DailyTripCount])
def read_daily_trips(
    db: Session = Depends(deps.get_db),
    current_user: deps.CurrentUser = Depends(deps.require("analytics:read")),
):
    """
    Trips created per day over the configured window.
    """
    now = datetime.utcnow()
    days = settings.DAILY_TRIPS_WINDOW_DAYS
    trips = crud.trip.get_created_since(db, since=now - timedelta(days=days))
    return analytics.daily_trip_counts(trips, now=now, days=days)

@router.get("/financial-evolution", response_model=List[schemas.MonthlyFinancials])
def read_financial_evolution(
    db: Session = Depends(deps.get_db),
    current_user: deps.CurrentUser = Depends(deps.require("analytics:read")),
):
    return analytics.monthly_financial_evolution(
        crud.trip.get_by_statuses(db, statuses=(schemas.TripStatus.completed,)),
        crud.fuel_log.get_multi(db),
        crud.maintenance_log.get_multi(db),
    )

@router.get("/driver-metrics", response_model=List[schemas.DriverMetric])
def read_driver_metrics(
    db: Session = Depends(deps.get_db),
    current_user: deps.CurrentUser = Depends(deps.require("analytics:read")),
):
    """
    Safety score and completion rate per driver.
    """
    trips = crud.trip.get_by_statuses(
        db, statuses=(schemas.TripStatus.dispatched, schemas.TripStatus.completed)
    )
    return analytics.driver_metrics(crud.driver.get_multi(db), trips)

@router.get("/bi", response_model=schemas.BusinessIntelligence)
def read_business_intelligence(
    db: Session = Depends(deps.get_db),
    current_user: deps.CurrentUser = Depends(deps.require("analytics:read")),
):
    """
    Best vehicle by ROI and revenue per vehicle for each region.
    """
    return analytics.business_intelligence(
        crud.vehicle.get_multi(db),
        crud.trip.get_by_statuses(db, statuses=(schemas.TripStatus.completed,)),
        crud.fuel_log.get_multi(db),
        crud.maintenance_log.get_multi(db),
    )

@router.get("/vehicle/{vehicle_id}", response_model=schemas.VehicleAnalytics)
def read_vehicle_analytics(
    vehicle_id: int,
    db: Session = Depends(deps.get_db),
    current_user: deps.CurrentUser = Depends(deps.require("analytics:read")),
):
    vehicle = crud.vehicle.get(db, id=vehicle_id)
    if not vehicle:
        raise NotFoundError("Vehicle not found")
    return analytics.vehicle_roi(vehicle, vehicle.trips, vehicle.fuel_logs, vehicle.maintenance_logs)

@router.get("/export", response_model=schemas.FinancialReport)
def export_financial_report(
    db: Session = Depends(deps.get_db),
    current_user: deps.CurrentUser = Depends(deps.require("analytics:read")),
):
    """
    Completed trips for the financial report. Formatting (CSV/PDF) is left to the client.
    """
    completed = crud.trip.get_by_statuses(db, statuses=(schemas.TripStatus.completed,))
    return analytics.financial_report(completed, now=datetime.utcnow())
