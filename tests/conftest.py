import itertools
import os
from datetime import date, timedelta

# Settings are read at import time, so the environment must be in place first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SUPABASE_URL", "https://fleet-test.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-key")
os.environ["SIMULATOR_ENABLED"] = "false"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fleet_api import models
from fleet_api.db.base import Base


@pytest.fixture
def engine():
    # One shared in-memory connection so the API threadpool sees the same data
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


def _save(db, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture
def make_vehicle(db):
    counter = itertools.count(1)

    def _make(**overrides):
        n = next(counter)
        data = {
            "model": f"Tata Prima {n}",
            "license_plate": f"MH01AB{1000 + n}",
            "max_capacity": 1000,
            "odometer": 0,
            "acquisition_cost": 0,
            "region": "Main",
            "vehicle_type": "Truck",
            "status": "Available",
        }
        data.update(overrides)
        return _save(db, models.Vehicle(**data))

    return _make


@pytest.fixture
def make_driver(db):
    counter = itertools.count(1)

    def _make(**overrides):
        n = next(counter)
        data = {
            "name": f"Driver {n}",
            "license_number": f"DL-{n:04d}",
            "license_category": "HMV",
            "expiry_date": date.today() + timedelta(days=365),
            "safety_score": 100,
            "region": "Main",
            "status": "Available",
        }
        data.update(overrides)
        return _save(db, models.Driver(**data))

    return _make


@pytest.fixture
def make_trip(db, make_vehicle, make_driver):
    def _make(vehicle=None, driver=None, **overrides):
        vehicle = vehicle or make_vehicle()
        driver = driver or make_driver()
        data = {
            "vehicle_id": vehicle.id,
            "driver_id": driver.id,
            "cargo_weight": 500,
            "revenue": 0,
            "start_location": "Mumbai",
            "end_location": "Pune",
            "start_odometer": 0,
            "status": "Draft",
        }
        data.update(overrides)
        return _save(db, models.Trip(**data))

    return _make
