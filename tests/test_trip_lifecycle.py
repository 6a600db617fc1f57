from datetime import date, timedelta

import pytest

from fleet_api import models
from fleet_api.core.errors import InvalidStateError, NotFoundError, ValidationFailure
from fleet_api.db.session import atomic
from fleet_api.schemas.trip import TripCreate, TripUpdate
from fleet_api.services import trip_lifecycle


def assert_on_trip_matches_dispatched(db):
    """Every On Trip vehicle has exactly one Dispatched trip, and vice versa."""
    for vehicle in db.query(models.Vehicle).all():
        dispatched = db.query(models.Trip).filter(
            models.Trip.vehicle_id == vehicle.id,
            models.Trip.status == "Dispatched",
        ).count()
        assert (vehicle.status == "On Trip") == (dispatched == 1)
        assert dispatched <= 1


# Create

def test_create_trip_starts_in_draft(db, make_vehicle, make_driver):
    vehicle = make_vehicle()
    driver = make_driver()

    trip = trip_lifecycle.create_trip(db, TripCreate(
        vehicle_id=vehicle.id, driver_id=driver.id, cargo_weight=200,
        start_location="Mumbai", end_location="Nashik", start_odometer=1000, revenue=5000,
    ))

    assert trip.id is not None
    assert trip.status == "Draft"
    assert trip.end_odometer is None
    assert trip.distance is None
    db.refresh(vehicle)
    assert vehicle.status == "Available"


def test_create_trip_requires_existing_vehicle(db, make_driver):
    driver = make_driver()
    with pytest.raises(NotFoundError, match="Vehicle not found"):
        trip_lifecycle.create_trip(db, TripCreate(vehicle_id=999, driver_id=driver.id))
    assert db.query(models.Trip).count() == 0


def test_create_trip_requires_existing_driver(db, make_vehicle):
    vehicle = make_vehicle()
    with pytest.raises(NotFoundError, match="Driver not found"):
        trip_lifecycle.create_trip(db, TripCreate(vehicle_id=vehicle.id, driver_id=999))


# Dispatch

def test_dispatch_marks_vehicle_and_driver_busy(db, make_trip):
    trip = make_trip()

    dispatched = trip_lifecycle.dispatch_trip(db, trip.id)

    assert dispatched.status == "Dispatched"
    assert dispatched.vehicle.status == "On Trip"
    assert dispatched.driver.status == "On Duty"
    assert_on_trip_matches_dispatched(db)


def test_dispatch_accepts_cargo_equal_to_capacity(db, make_vehicle, make_trip):
    vehicle = make_vehicle(max_capacity=800)
    trip = make_trip(vehicle=vehicle, cargo_weight=800)

    assert trip_lifecycle.dispatch_trip(db, trip.id).status == "Dispatched"


def test_dispatch_rejects_cargo_over_capacity(db, make_vehicle, make_trip):
    vehicle = make_vehicle(max_capacity=800)
    trip = make_trip(vehicle=vehicle, cargo_weight=800.5)

    with pytest.raises(ValidationFailure, match="capacity"):
        trip_lifecycle.dispatch_trip(db, trip.id)

    assert trip.status == "Draft"
    assert trip.vehicle.status == "Available"
    assert trip.driver.status == "Available"


def test_dispatch_accepts_license_expiring_today(db, make_driver, make_trip):
    today = date(2026, 3, 1)
    trip = make_trip(driver=make_driver(expiry_date=today))

    assert trip_lifecycle.dispatch_trip(db, trip.id, today=today).status == "Dispatched"


def test_dispatch_rejects_expired_license(db, make_driver, make_trip):
    today = date(2026, 3, 1)
    trip = make_trip(driver=make_driver(expiry_date=today - timedelta(days=1)))

    with pytest.raises(ValidationFailure, match="license expired"):
        trip_lifecycle.dispatch_trip(db, trip.id, today=today)
    assert trip.status == "Draft"


def test_dispatch_rejects_suspended_driver(db, make_driver, make_trip):
    trip = make_trip(driver=make_driver(status="Suspended"))

    with pytest.raises(ValidationFailure, match="Suspended"):
        trip_lifecycle.dispatch_trip(db, trip.id)


def test_dispatch_rejects_driver_already_on_duty(db, make_driver, make_trip):
    driver = make_driver()
    first = make_trip(driver=driver)
    second = make_trip(driver=driver)
    trip_lifecycle.dispatch_trip(db, first.id)

    with pytest.raises(InvalidStateError, match="On Duty"):
        trip_lifecycle.dispatch_trip(db, second.id)
    assert second.status == "Draft"


def test_dispatch_accepts_off_duty_driver(db, make_driver, make_trip):
    trip = make_trip(driver=make_driver(status="Off Duty"))

    dispatched = trip_lifecycle.dispatch_trip(db, trip.id)
    assert dispatched.driver.status == "On Duty"


@pytest.mark.parametrize("vehicle_status", ["On Trip", "In Shop", "Retired"])
def test_dispatch_requires_available_vehicle(db, make_vehicle, make_trip, vehicle_status):
    trip = make_trip(vehicle=make_vehicle(status=vehicle_status))

    with pytest.raises(InvalidStateError, match="must be Available"):
        trip_lifecycle.dispatch_trip(db, trip.id)
    assert trip.driver.status == "Available"


def test_same_vehicle_cannot_be_dispatched_twice(db, make_vehicle, make_trip):
    vehicle = make_vehicle()
    first = make_trip(vehicle=vehicle)
    second = make_trip(vehicle=vehicle)
    trip_lifecycle.dispatch_trip(db, first.id)

    with pytest.raises(InvalidStateError):
        trip_lifecycle.dispatch_trip(db, second.id)
    assert_on_trip_matches_dispatched(db)


@pytest.mark.parametrize("status", ["Dispatched", "Completed", "Cancelled"])
def test_only_draft_trips_can_be_dispatched(db, make_trip, status):
    trip = make_trip(status=status)

    with pytest.raises(InvalidStateError, match="Only draft trips"):
        trip_lifecycle.dispatch_trip(db, trip.id)


def test_dispatch_unknown_trip(db):
    with pytest.raises(NotFoundError, match="Trip not found"):
        trip_lifecycle.dispatch_trip(db, 12345)


# Complete

def test_round_trip_records_distance_and_odometer(db, make_vehicle, make_driver):
    vehicle = make_vehicle(odometer=1000)
    driver = make_driver()
    trip = trip_lifecycle.create_trip(db, TripCreate(
        vehicle_id=vehicle.id, driver_id=driver.id, cargo_weight=300,
        start_odometer=1000, revenue=4200,
    ))
    trip_lifecycle.dispatch_trip(db, trip.id)

    completed = trip_lifecycle.complete_trip(db, trip.id, end_odometer=1250)

    assert completed.status == "Completed"
    assert completed.distance == 250
    assert completed.revenue == 4200
    db.refresh(vehicle)
    db.refresh(driver)
    assert vehicle.odometer == 1250
    assert vehicle.status == "Available"
    assert driver.status == "Available"
    assert_on_trip_matches_dispatched(db)


def test_complete_records_revenue_when_given(db, make_trip):
    trip = make_trip(start_odometer=100, revenue=10)
    trip_lifecycle.dispatch_trip(db, trip.id)

    completed = trip_lifecycle.complete_trip(db, trip.id, end_odometer=180, revenue=950)
    assert completed.revenue == 950


def test_complete_accepts_zero_distance(db, make_trip):
    trip = make_trip(start_odometer=500)
    trip_lifecycle.dispatch_trip(db, trip.id)

    completed = trip_lifecycle.complete_trip(db, trip.id, end_odometer=500)
    assert completed.distance == 0


def test_complete_rejects_odometer_regression(db, make_trip):
    trip = make_trip(start_odometer=500)
    trip_lifecycle.dispatch_trip(db, trip.id)

    with pytest.raises(ValidationFailure, match="odometer"):
        trip_lifecycle.complete_trip(db, trip.id, end_odometer=499.9)

    assert trip.status == "Dispatched"
    assert trip.vehicle.status == "On Trip"
    assert trip.driver.status == "On Duty"


def test_only_dispatched_trips_can_be_completed(db, make_trip):
    trip = make_trip()
    with pytest.raises(InvalidStateError, match="Only dispatched trips"):
        trip_lifecycle.complete_trip(db, trip.id, end_odometer=10)


# Cancel

def test_cancel_draft_leaves_vehicle_and_driver_alone(db, make_vehicle, make_driver, make_trip):
    trip = make_trip(vehicle=make_vehicle(status="In Shop"), driver=make_driver(status="Off Duty"))

    cancelled = trip_lifecycle.cancel_trip(db, trip.id)

    assert cancelled.status == "Cancelled"
    assert cancelled.vehicle.status == "In Shop"
    assert cancelled.driver.status == "Off Duty"


def test_cancel_dispatched_releases_vehicle_and_driver(db, make_trip):
    trip = make_trip()
    trip_lifecycle.dispatch_trip(db, trip.id)

    cancelled = trip_lifecycle.cancel_trip(db, trip.id)

    assert cancelled.status == "Cancelled"
    assert cancelled.vehicle.status == "Available"
    assert cancelled.driver.status == "Available"
    assert_on_trip_matches_dispatched(db)


@pytest.mark.parametrize("status", ["Completed", "Cancelled"])
def test_cancel_terminal_trip_fails(db, make_trip, status):
    trip = make_trip(status=status)
    with pytest.raises(InvalidStateError):
        trip_lifecycle.cancel_trip(db, trip.id)


# Delete

def test_delete_dispatched_trip_releases_resources(db, make_trip):
    trip = make_trip()
    trip_lifecycle.dispatch_trip(db, trip.id)
    vehicle_id, driver_id = trip.vehicle_id, trip.driver_id

    trip_lifecycle.delete_trip(db, trip.id)

    assert db.query(models.Trip).count() == 0
    assert db.get(models.Vehicle, vehicle_id).status == "Available"
    assert db.get(models.Driver, driver_id).status == "Available"


def test_delete_completed_trip_keeps_statuses(db, make_vehicle, make_trip):
    vehicle = make_vehicle(status="In Shop")
    trip = make_trip(vehicle=vehicle, status="Completed")

    trip_lifecycle.delete_trip(db, trip.id)

    db.refresh(vehicle)
    assert vehicle.status == "In Shop"


def test_delete_unknown_trip(db):
    with pytest.raises(NotFoundError):
        trip_lifecycle.delete_trip(db, 7)


# Update

def test_update_draft_trip(db, make_vehicle, make_trip):
    trip = make_trip()
    other = make_vehicle()

    updated = trip_lifecycle.update_trip(
        db, trip.id, TripUpdate(vehicle_id=other.id, cargo_weight=900, end_location="Surat")
    )

    assert updated.vehicle_id == other.id
    assert updated.cargo_weight == 900
    assert updated.end_location == "Surat"
    assert updated.start_location == "Mumbai"


@pytest.mark.parametrize("status", ["Completed", "Cancelled"])
def test_update_terminal_trip_is_rejected(db, make_trip, status):
    trip = make_trip(status=status, revenue=100)

    with pytest.raises(InvalidStateError, match="cannot be edited"):
        trip_lifecycle.update_trip(db, trip.id, TripUpdate(revenue=999))
    assert trip.revenue == 100


def test_update_dispatched_trip_keeps_its_vehicle(db, make_vehicle, make_trip):
    trip = make_trip()
    trip_lifecycle.dispatch_trip(db, trip.id)

    with pytest.raises(InvalidStateError, match="vehicle"):
        trip_lifecycle.update_trip(db, trip.id, TripUpdate(vehicle_id=make_vehicle().id))
    assert_on_trip_matches_dispatched(db)


def test_update_dispatched_trip_rechecks_capacity(db, make_vehicle, make_trip):
    trip = make_trip(vehicle=make_vehicle(max_capacity=1000), cargo_weight=400)
    trip_lifecycle.dispatch_trip(db, trip.id)

    with pytest.raises(ValidationFailure, match="capacity"):
        trip_lifecycle.update_trip(db, trip.id, TripUpdate(cargo_weight=1200))

    updated = trip_lifecycle.update_trip(db, trip.id, TripUpdate(cargo_weight=1000))
    assert updated.cargo_weight == 1000


def test_update_to_missing_driver(db, make_trip):
    trip = make_trip()
    with pytest.raises(NotFoundError, match="Driver not found"):
        trip_lifecycle.update_trip(db, trip.id, TripUpdate(driver_id=4242))


# Atomicity

def test_atomic_rolls_back_every_staged_row(db, make_trip):
    trip = make_trip()

    with pytest.raises(RuntimeError):
        with atomic(db):
            trip.status = "Dispatched"
            trip.vehicle.status = "On Trip"
            trip.driver.status = "On Duty"
            db.flush()
            raise RuntimeError("store went away")

    assert trip.status == "Draft"
    assert trip.vehicle.status == "Available"
    assert trip.driver.status == "Available"


def test_invariant_holds_over_a_mixed_sequence(db, make_vehicle, make_driver, make_trip):
    vehicles = [make_vehicle() for _ in range(3)]
    drivers = [make_driver() for _ in range(3)]
    trips = [make_trip(vehicle=v, driver=d) for v, d in zip(vehicles, drivers)]

    trip_lifecycle.dispatch_trip(db, trips[0].id)
    trip_lifecycle.dispatch_trip(db, trips[1].id)
    assert_on_trip_matches_dispatched(db)

    trip_lifecycle.complete_trip(db, trips[0].id, end_odometer=50)
    trip_lifecycle.cancel_trip(db, trips[1].id)
    trip_lifecycle.dispatch_trip(db, trips[2].id)
    assert_on_trip_matches_dispatched(db)

    trip_lifecycle.delete_trip(db, trips[2].id)
    assert_on_trip_matches_dispatched(db)
    assert all(v.status == "Available" for v in db.query(models.Vehicle).all())
