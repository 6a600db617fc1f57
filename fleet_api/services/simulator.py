"""
Background position simulator.

Keeps the dashboard map alive: every tick nudges each On Trip vehicle by a
small random offset and adds the travelled distance to its odometer. It is
not a navigation model; it knows nothing about routes or destinations and
never touches trips or drivers.
"""
import asyncio
import logging
import math
import random
from datetime import datetime
from typing import Callable, Optional, Tuple

from sqlalchemy.orm import Session

from fleet_api import crud
from fleet_api.db.session import atomic
from fleet_api.schemas.vehicle import VehicleStatus

logger = logging.getLogger(__name__)

# Vehicles without a known position start from Mumbai
DEFAULT_POSITION = (19.0760, 72.8777)
MAX_STEP_DEGREES = 0.02  # full width of the random step, i.e. +/-0.01 deg per axis
KM_PER_DEGREE = 111


def move_vehicle(
    lat: Optional[float], lng: Optional[float], rng: random.Random
) -> Tuple[float, float, float]:
    """
    Return ``(new_lat, new_lng, distance_km)`` for one simulated step.

    Distance uses a flat-earth approximation of 111 km per degree.
    """
    current_lat = DEFAULT_POSITION[0] if lat is None else lat
    current_lng = DEFAULT_POSITION[1] if lng is None else lng

    delta_lat = (rng.random() - 0.5) * MAX_STEP_DEGREES
    delta_lng = (rng.random() - 0.5) * MAX_STEP_DEGREES
    distance = math.sqrt(delta_lat * delta_lat + delta_lng * delta_lng) * KM_PER_DEGREE
    return current_lat + delta_lat, current_lng + delta_lng, distance


class PositionSimulator:
    """
    Periodic task moving On Trip vehicles.

    Args:
        session_factory: Callable returning a new SQLAlchemy session
        rng: Random source; inject a seeded ``random.Random`` for deterministic runs
        interval: Seconds between ticks
        activate_count: How many Available vehicles to promote when nothing is On Trip
        activate_when_idle: Whether to promote vehicles at all when the fleet is idle
        clock: Returns the timestamp written to ``last_updated``
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        rng: Optional[random.Random] = None,
        interval: float = 10.0,
        activate_count: int = 3,
        activate_when_idle: bool = True,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.session_factory = session_factory
        self.rng = rng or random.Random()
        self.interval = interval
        self.activate_count = activate_count
        self.activate_when_idle = activate_when_idle
        self.clock = clock
        self._task: Optional[asyncio.Task] = None

    def tick(self) -> int:
        """Run one simulation step. Returns the number of vehicles moved."""
        db = self.session_factory()
        try:
            with atomic(db):
                vehicles = crud.vehicle.get_by_status(db, status=VehicleStatus.on_trip)
                if not vehicles:
                    self._activate_idle(db)
                    return 0

                now = self.clock()
                for vehicle in vehicles:
                    new_lat, new_lng, distance = move_vehicle(
                        vehicle.current_lat, vehicle.current_lng, self.rng
                    )
                    vehicle.current_lat = new_lat
                    vehicle.current_lng = new_lng
                    vehicle.odometer = (vehicle.odometer or 0) + distance
                    vehicle.last_updated = now
            logger.debug(f"Simulation tick moved {len(vehicles)} vehicles")
            return len(vehicles)
        finally:
            db.close()

    def _activate_idle(self, db: Session) -> None:
        if not self.activate_when_idle or self.activate_count <= 0:
            logger.debug("No vehicles currently on trip")
            return
        available = crud.vehicle.get_by_status(
            db, status=VehicleStatus.available, limit=self.activate_count
        )
        if not available:
            logger.debug("No vehicles currently on trip and none available to activate")
            return
        for vehicle in available:
            vehicle.status = VehicleStatus.on_trip.value
        logger.info(f"Activating {len(available)} vehicles for movement: {[v.id for v in available]}")

    async def run(self) -> None:
        """Tick forever until cancelled. A failing tick is logged and the loop carries on."""
        logger.info(f"Starting position simulator (every {self.interval}s)")
        while True:
            try:
                await asyncio.to_thread(self.tick)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Simulation tick failed")
            await asyncio.sleep(self.interval)

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Position simulator stopped")
