"""
Fleet analytics.

Pure folds over rows that were already fetched from the store: nothing here
touches the database, and the current date/time is passed in. Every request
re-scans the full row sets, so two calls over the same rows give the same
output.

Rows only need the attributes the ORM models expose (``status``,
``revenue``, ``cost``...), so tests can pass transient model instances.
"""
import math
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

from fleet_api.schemas.trip import TripStatus, ACTIVE_TRIP_STATUSES
from fleet_api.schemas.vehicle import VehicleStatus

OPERATIONAL_TRIP_STATUSES = (TripStatus.dispatched.value, TripStatus.completed.value)
PENDING_TRIP_STATUSES = tuple(s.value for s in ACTIVE_TRIP_STATUSES)


def _num(value: Any) -> float:
    return float(value) if value is not None else 0.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _sum(rows: Iterable[Any], attr: str) -> float:
    return sum(_num(getattr(row, attr, None)) for row in rows)


# ---------------------------------------------------------------------------
# Dashboard counters
# ---------------------------------------------------------------------------

def active_fleet_count(vehicles: Sequence[Any]) -> int:
    """Vehicles that are not Retired."""
    return sum(1 for v in vehicles if v.status != VehicleStatus.retired.value)


def maintenance_alert_count(vehicles: Sequence[Any]) -> int:
    return sum(1 for v in vehicles if v.status == VehicleStatus.in_shop.value)


def utilization_rate(vehicles: Sequence[Any]) -> float:
    """Percentage of the active fleet currently On Trip, 2 dp; 0 for an empty fleet."""
    active = active_fleet_count(vehicles)
    if active == 0:
        return 0.0
    on_trip = sum(1 for v in vehicles if v.status == VehicleStatus.on_trip.value)
    return round(on_trip / active * 100, 2)


def pending_cargo_count(trips: Sequence[Any]) -> int:
    return sum(1 for t in trips if t.status in PENDING_TRIP_STATUSES)


def compliance_alert_count(drivers: Sequence[Any], today: date) -> int:
    """Drivers whose license expired strictly before ``today``."""
    return sum(1 for d in drivers if d.expiry_date is not None and d.expiry_date < today)


def financial_summary(
    trips: Sequence[Any],
    fuel_logs: Sequence[Any],
    maintenance_logs: Sequence[Any],
    *,
    completed_only: bool = False,
) -> Dict[str, float]:
    if completed_only:
        trips = [t for t in trips if t.status == TripStatus.completed.value]
    revenue = _sum(trips, "revenue")
    fuel_cost = _sum(fuel_logs, "cost")
    maintenance_cost = _sum(maintenance_logs, "cost")
    return {
        "revenue": round(revenue, 2),
        "fuel_cost": round(fuel_cost, 2),
        "maintenance_cost": round(maintenance_cost, 2),
        "profit": round(revenue - (fuel_cost + maintenance_cost), 2),
    }


def dashboard_metrics(
    vehicles: Sequence[Any],
    drivers: Sequence[Any],
    trips: Sequence[Any],
    fuel_logs: Sequence[Any],
    maintenance_logs: Sequence[Any],
    *,
    today: date,
) -> Dict[str, Any]:
    # Dashboard revenue counts every trip, not only completed ones
    finances = financial_summary(trips, fuel_logs, maintenance_logs)
    return {
        "active_fleet_count": active_fleet_count(vehicles),
        "maintenance_alerts_count": maintenance_alert_count(vehicles),
        "utilization_rate": utilization_rate(vehicles),
        "pending_cargo_count": pending_cargo_count(trips),
        "compliance_alerts_count": compliance_alert_count(drivers, today),
        "total_revenue": finances["revenue"],
        "total_profit": finances["profit"],
    }


# ---------------------------------------------------------------------------
# Time series
# ---------------------------------------------------------------------------

def daily_trip_counts(trips: Sequence[Any], *, now: datetime, days: int = 30) -> List[Dict[str, Any]]:
    """Trips created in the last ``days`` days, counted per ISO calendar day, oldest first."""
    since = now - timedelta(days=days)
    counts: Dict[str, int] = defaultdict(int)
    for trip in trips:
        if trip.created_at is None or trip.created_at < since:
            continue
        counts[trip.created_at.date().isoformat()] += 1
    return [{"date": day, "count": counts[day]} for day in sorted(counts)]


def monthly_financial_evolution(
    trips: Sequence[Any],
    fuel_logs: Sequence[Any],
    maintenance_logs: Sequence[Any],
) -> List[Dict[str, Any]]:
    """
    Completed-trip revenue and fuel + maintenance cost per ``YYYY-MM``.

    Months sort lexicographically, which for this format is chronological.
    """
    evolution: Dict[str, Dict[str, Any]] = {}

    def bucket(month: str) -> Dict[str, Any]:
        if month not in evolution:
            evolution[month] = {"month": month, "revenue": 0.0, "cost": 0.0}
        return evolution[month]

    for trip in trips:
        if trip.status != TripStatus.completed.value or trip.created_at is None:
            continue
        bucket(trip.created_at.strftime("%Y-%m"))["revenue"] += _num(trip.revenue)
    for log in fuel_logs:
        if log.date is not None:
            bucket(log.date.strftime("%Y-%m"))["cost"] += _num(log.cost)
    for log in maintenance_logs:
        if log.service_date is not None:
            bucket(log.service_date.strftime("%Y-%m"))["cost"] += _num(log.cost)

    result = []
    for month in sorted(evolution):
        entry = evolution[month]
        result.append({
            "month": month,
            "revenue": round(entry["revenue"], 2),
            "cost": round(entry["cost"], 2),
        })
    return result


# ---------------------------------------------------------------------------
# Per-vehicle and regional figures
# ---------------------------------------------------------------------------

def _roi(revenue: float, cost: float, acquisition_cost: Any) -> float:
    acquisition = _num(acquisition_cost)
    if acquisition <= 0:
        return 0.0
    return round((revenue - cost) / acquisition, 4)


def _group_by_vehicle(rows: Iterable[Any]) -> Dict[Any, List[Any]]:
    grouped: Dict[Any, List[Any]] = defaultdict(list)
    for row in rows:
        grouped[row.vehicle_id].append(row)
    return grouped


def vehicle_roi(
    vehicle: Any,
    trips: Sequence[Any],
    fuel_logs: Sequence[Any],
    maintenance_logs: Sequence[Any],
) -> Dict[str, Any]:
    """
    ROI of one vehicle: (completed-trip revenue - fuel - maintenance) / acquisition cost.

    Rows belonging to other vehicles are ignored. A vehicle without an
    acquisition cost has an ROI of 0.
    """
    revenue = sum(
        _num(t.revenue) for t in trips
        if t.vehicle_id == vehicle.id and t.status == TripStatus.completed.value
    )
    fuel_cost = sum(_num(f.cost) for f in fuel_logs if f.vehicle_id == vehicle.id)
    maintenance_cost = sum(_num(m.cost) for m in maintenance_logs if m.vehicle_id == vehicle.id)
    return {
        "vehicle_id": vehicle.id,
        "revenue": round(revenue, 2),
        "fuel_cost": round(fuel_cost, 2),
        "maintenance_cost": round(maintenance_cost, 2),
        "acquisition_cost": _num(vehicle.acquisition_cost),
        "roi": _roi(revenue, fuel_cost + maintenance_cost, vehicle.acquisition_cost),
    }


def _vehicle_totals(
    vehicles: Sequence[Any],
    trips: Sequence[Any],
    fuel_logs: Sequence[Any],
    maintenance_logs: Sequence[Any],
) -> List[Dict[str, Any]]:
    """Unrounded revenue and running cost per vehicle."""
    trips_by_vehicle = _group_by_vehicle(t for t in trips if t.status == TripStatus.completed.value)
    fuel_by_vehicle = _group_by_vehicle(fuel_logs)
    maintenance_by_vehicle = _group_by_vehicle(maintenance_logs)

    totals = []
    for vehicle in vehicles:
        totals.append({
            "vehicle": vehicle,
            "revenue": _sum(trips_by_vehicle.get(vehicle.id, []), "revenue"),
            "total_cost": (
                _sum(fuel_by_vehicle.get(vehicle.id, []), "cost")
                + _sum(maintenance_by_vehicle.get(vehicle.id, []), "cost")
            ),
        })
    return totals


def _roi_entry(totals: Dict[str, Any]) -> Dict[str, Any]:
    vehicle = totals["vehicle"]
    return {
        "id": vehicle.id,
        "model": vehicle.model,
        "license_plate": vehicle.license_plate,
        "region": vehicle.region,
        "revenue": round(totals["revenue"], 2),
        "total_cost": round(totals["total_cost"], 2),
        "roi": _roi(totals["revenue"], totals["total_cost"], vehicle.acquisition_cost),
    }


def vehicle_rois(
    vehicles: Sequence[Any],
    trips: Sequence[Any],
    fuel_logs: Sequence[Any],
    maintenance_logs: Sequence[Any],
) -> List[Dict[str, Any]]:
    return [_roi_entry(t) for t in _vehicle_totals(vehicles, trips, fuel_logs, maintenance_logs)]


def highest_roi_vehicle(rois: Sequence[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not rois:
        return None
    return max(rois, key=lambda r: r["roi"])


def regional_metrics(totals: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Revenue per vehicle for each region, most efficient region first.

    ``totals`` carries unrounded per-vehicle revenue; rounding happens once
    on the regional figures.
    """
    regions: Dict[Any, Dict[str, Any]] = {}
    for entry in totals:
        name = entry["vehicle"].region
        region = regions.setdefault(name, {"region": name, "total_revenue": 0.0, "vehicle_count": 0})
        region["total_revenue"] += entry["revenue"]
        region["vehicle_count"] += 1

    metrics = []
    for region in regions.values():
        efficiency = region["total_revenue"] / region["vehicle_count"] if region["vehicle_count"] else 0.0
        metrics.append({
            "region": region["region"],
            "total_revenue": round(region["total_revenue"], 2),
            "vehicle_count": region["vehicle_count"],
            "efficiency": round(efficiency, 2),
        })
    return sorted(metrics, key=lambda m: m["efficiency"], reverse=True)


def business_intelligence(
    vehicles: Sequence[Any],
    trips: Sequence[Any],
    fuel_logs: Sequence[Any],
    maintenance_logs: Sequence[Any],
) -> Dict[str, Any]:
    totals = _vehicle_totals(vehicles, trips, fuel_logs, maintenance_logs)
    rois = [_roi_entry(t) for t in totals]
    return {
        "highest_roi": highest_roi_vehicle(rois),
        "regional_metrics": regional_metrics(totals),
        "vehicle_count": len(rois),
    }


# ---------------------------------------------------------------------------
# Drivers
# ---------------------------------------------------------------------------

def driver_trip_stats(trips: Sequence[Any]) -> Dict[Any, Dict[str, Any]]:
    """Operational (Dispatched + Completed) trip totals per driver id."""
    stats: Dict[Any, Dict[str, Any]] = {}
    for trip in trips:
        if trip.status not in OPERATIONAL_TRIP_STATUSES:
            continue
        entry = stats.setdefault(trip.driver_id, {"total": 0, "completed": 0, "distance": 0.0})
        entry["total"] += 1
        if trip.status == TripStatus.completed.value:
            entry["completed"] += 1
            distance = _num(trip.end_odometer) - _num(trip.start_odometer)
            if distance > 0:
                entry["distance"] += distance
    return stats


def completion_rate(completed: int, total: int) -> int:
    """Completed share of operational trips as a whole percentage; 0 without trips."""
    if total <= 0:
        return 0
    return _round_half_up(completed / total * 100)


def driver_metrics(drivers: Sequence[Any], trips: Sequence[Any]) -> List[Dict[str, Any]]:
    stats = driver_trip_stats(trips)
    metrics = []
    for driver in drivers:
        entry = stats.get(driver.id, {"total": 0, "completed": 0})
        metrics.append({
            "driver_id": driver.id,
            "name": driver.name,
            "safety_score": driver.safety_score,
            "completion_rate": completion_rate(entry["completed"], entry["total"]),
            "total_trips": entry["total"],
        })
    return metrics


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

def financial_report(trips: Sequence[Any], *, now: datetime) -> Dict[str, Any]:
    """Completed trips, as fed to the external report formatter."""
    completed = [t for t in trips if t.status == TripStatus.completed.value]
    return {
        "message": "Financial report generated",
        "timestamp": now,
        "trip_count": len(completed),
        "report_data": completed,
    }
