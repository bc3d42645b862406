"""
Builds the DispatchContext the HTTP API serves from.
Drivers are seeded from ACCESSRIDE_DRIVERS_CSV; policies and the optional
OSRM server come from the environment.
"""

import logging
import os

from django.conf import settings

from chat.policy import chat_policy_from_env
from dispatch.context import DispatchContext, build_context
from dispatch.policy import match_policy_from_env
from drivers.loader import load_drivers_csv
from routing.osrm_client import OSRMClient, osrm_base_url

logger = logging.getLogger(__name__)


def build_default_context() -> DispatchContext:
    drivers = []
    seed_path = settings.ACCESSRIDE_DRIVERS_CSV
    if seed_path and os.path.exists(seed_path):
        drivers = load_drivers_csv(seed_path)
    else:
        logger.warning("Driver seed file %s not found; starting with an empty fleet", seed_path)

    osrm = OSRMClient() if osrm_base_url() else None

    context = build_context(
        drivers,
        match_policy=match_policy_from_env(),
        chat_policy=chat_policy_from_env(),
        osrm=osrm,
    )
    logger.info("Dispatch context ready with %d drivers (OSRM %s)", len(context.drivers), "on" if osrm else "off")
    return context
