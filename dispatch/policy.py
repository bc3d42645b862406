"""
Purpose: Central configuration for driver matching and booking.
What it does:

Stores all tunable thresholds for finding a driver and booking a ride:

MATCH_MODE = "any"              # driver needs any requested tag ("all": every tag)
RANK_BY_DISTANCE = False        # keep registry order unless asked to rank
BOOKING_LEAD_MINUTES = 15       # estimated arrival for a fresh booking
NEARBY_RADIUS_M = 5000          # default radius for nearby search

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

MATCH_MODES = ("any", "all")


@dataclass(frozen=True)
class MatchPolicy:
    """
    Central configuration for matching and booking.
    """

    # --- Capability matching ---
    # "any": the driver has at least one of the requested accessibility features.
    # "all": the driver has every requested feature.
    # Empty requirements match every available driver in both modes.
    match_mode: str = "any"

    # --- Ranking ---
    # When True and the request carries pickup coordinates, candidates are
    # ordered by great-circle distance, then rating (highest first).
    # Otherwise the first capable driver in registry order wins.
    rank_by_distance: bool = False

    # --- Booking ---
    booking_lead_minutes: int = 15

    # --- Geo search ---
    nearby_radius_m: int = 5000

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.match_mode not in MATCH_MODES:
            raise ValueError(f"match_mode must be one of {MATCH_MODES}, got {self.match_mode!r}")

        if self.booking_lead_minutes < 0:
            raise ValueError("booking_lead_minutes must be >= 0")

        if self.nearby_radius_m <= 0:
            raise ValueError("nearby_radius_m must be > 0")


def default_match_policy() -> MatchPolicy:
    """
    Convenience factory for the default policy.
    """
    p = MatchPolicy()
    p.validate()
    return p


def match_policy_from_env() -> MatchPolicy:
    """
    Reads ACCESSRIDE_* overrides from the environment (.env supported).
    """
    load_dotenv()
    p = MatchPolicy(
        match_mode=os.getenv("ACCESSRIDE_MATCH_MODE", "any").strip().lower(),
        rank_by_distance=os.getenv("ACCESSRIDE_RANK_BY_DISTANCE", "false").strip().lower() in ("1", "true", "yes"),
        booking_lead_minutes=int(os.getenv("ACCESSRIDE_BOOKING_LEAD_MINUTES", "15")),
        nearby_radius_m=int(os.getenv("ACCESSRIDE_NEARBY_RADIUS_M", "5000")),
    )
    p.validate()
    return p
