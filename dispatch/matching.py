"""
Purpose: Business rules for choosing the driver for a booking (the MatchingEngine).
What it does:
Accepts the ride's special requirements, filters the registry's available
drivers by accessibility features, ranks what is left and returns the winner.

Rule: Matching only picks. Attaching the driver to the ride and flipping
availability is the lifecycle's job, done under its lock.
"""

import logging
from typing import AbstractSet, List, Optional, Tuple

from common.errors import NoDriverAvailable
from drivers.models import Driver
from drivers.registry import DriverRegistry
from .candidate_filter import build_base_candidates
from .policy import MatchPolicy, default_match_policy
from .scoring import rank_candidates

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]


class MatchingEngine:
    def __init__(self, drivers: DriverRegistry, policy: Optional[MatchPolicy] = None):
        self.drivers = drivers
        self.policy = policy or default_match_policy()

    def candidates(self, requirements: AbstractSet[str], pickup: Optional[LatLon] = None) -> List[Driver]:
        """
        Every available driver that qualifies, best first.
        """
        eligible = build_base_candidates(
            self.drivers.list_available(),
            frozenset(requirements),
            match_mode=self.policy.match_mode,
        )
        if self.policy.rank_by_distance and pickup is not None:
            return rank_candidates(eligible, pickup)
        return eligible

    def match(self, requirements: AbstractSet[str], pickup: Optional[LatLon] = None) -> Driver:
        ranked = self.candidates(requirements, pickup)
        if not ranked:
            logger.warning(
                "No available driver for requirements %s (mode=%s)",
                sorted(requirements), self.policy.match_mode,
            )
            raise NoDriverAvailable("No drivers available with the required accessibility features")
        return ranked[0]
