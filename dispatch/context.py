"""
Purpose: Wire the stores and services a request works against.
What it does:
Builds one DispatchContext (driver registry, ride store, matching engine,
lifecycle, rating aggregator, chat ledger, optional OSRM client) from
explicit inputs. Callers pass the context around instead of reaching for
module-level state, so tests and the HTTP layer can each hold their own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from threading import RLock
from typing import Callable, Iterable, List, Optional, Tuple

from chat.ledger import ChatLedger
from chat.models import ChatMessage, Transcriber
from chat.policy import ChatPolicy, default_chat_policy
from drivers.models import Driver
from drivers.registry import DriverRegistry
from rides.models import Ride
from rides.store import RideStore
from routing.eta import attach_road_eta
from routing.geo import NearbyDriver, nearby
from routing.osrm_client import OSRMClient, OSRMError
from .lifecycle import RideLifecycle, parse_coordinates
from .matching import MatchingEngine
from .policy import MatchPolicy, default_match_policy
from .rating import RatingAggregator

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]


@dataclass
class DispatchContext:
    drivers: DriverRegistry
    rides: RideStore
    matching: MatchingEngine
    lifecycle: RideLifecycle
    ratings: RatingAggregator
    chat: ChatLedger
    match_policy: MatchPolicy
    osrm: Optional[OSRMClient] = None

    def nearby_drivers(self, origin, radius_m: Optional[float] = None) -> List[NearbyDriver]:
        """
        Available drivers around `origin`, nearest first.
        Road ETAs are added when an OSRM client is configured; if OSRM is down
        the straight-line results are still returned.
        """
        point = parse_coordinates(origin)
        radius = self.match_policy.nearby_radius_m if radius_m is None else radius_m
        results = nearby(self.drivers.snapshot(), point, radius)

        if self.osrm is not None and results:
            try:
                results = attach_road_eta(self.osrm, point, results)
            except OSRMError as exc:
                logger.warning("Road ETA unavailable, returning straight-line results: %s", exc)
        return results


def build_context(
    drivers: Iterable[Driver] = (),
    rides: Iterable[Ride] = (),
    messages: Iterable[ChatMessage] = (),
    *,
    match_policy: Optional[MatchPolicy] = None,
    chat_policy: Optional[ChatPolicy] = None,
    osrm: Optional[OSRMClient] = None,
    transcriber: Optional[Transcriber] = None,
    clock: Callable[[], datetime] = datetime.utcnow,
) -> DispatchContext:
    match_policy = match_policy or default_match_policy()
    chat_policy = chat_policy or default_chat_policy()

    registry = DriverRegistry(drivers, clock=clock)
    store = RideStore(registry, rides)
    matching = MatchingEngine(registry, match_policy)

    # One write lock for every ride/driver mutation path.
    write_lock = RLock()

    return DispatchContext(
        drivers=registry,
        rides=store,
        matching=matching,
        lifecycle=RideLifecycle(store, registry, matching, match_policy, clock=clock, lock=write_lock),
        ratings=RatingAggregator(store, registry, clock=clock, lock=write_lock),
        chat=ChatLedger(store, chat_policy, transcriber=transcriber, clock=clock, messages=messages),
        match_policy=match_policy,
        osrm=osrm,
    )
