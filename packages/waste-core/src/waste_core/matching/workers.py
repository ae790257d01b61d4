from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from geo_engine.distance import haversine_distance_km
from geo_engine.geofence import ServiceArea
from geo_engine.models import GeoPoint

from waste_core.core.models import Availability, Worker


@dataclass(frozen=True)
class WorkerDistance:
    worker: Worker
    distance_km: float


def is_assignable(worker: Worker) -> bool:
    return worker.is_online and worker.availability is Availability.AVAILABLE and worker.location is not None


def find_closest_worker(target: GeoPoint, workers: Iterable[Worker]) -> Worker | None:
    """Linear scan for the nearest online, available worker with a known position.

    Ties keep the worker seen first.
    """
    closest: Worker | None = None
    shortest = 0.0
    for worker in workers:
        if not is_assignable(worker):
            continue
        assert worker.location is not None
        distance = haversine_distance_km(target, worker.location)
        if closest is None or distance < shortest:
            closest = worker
            shortest = distance
    return closest


def rank_workers(
    target: GeoPoint,
    workers: Iterable[Worker],
    max_distance_km: float | None = None,
) -> list[WorkerDistance]:
    """Assignable workers nearest first, optionally limited to a radius around the target."""
    area = ServiceArea(center=target, radius_km=max_distance_km) if max_distance_km is not None else None
    ranked: list[WorkerDistance] = []
    for worker in workers:
        if not is_assignable(worker):
            continue
        assert worker.location is not None
        if area is not None and not area.contains(worker.location):
            continue
        ranked.append(WorkerDistance(worker=worker, distance_km=haversine_distance_km(target, worker.location)))
    ranked.sort(key=lambda item: item.distance_km)
    return ranked
