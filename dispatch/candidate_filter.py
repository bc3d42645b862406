#Purpose: Non-routing hard eligibility filtering (rule gates).
#Builds the base candidate set before ranking.
#Responsibilities:
#available (not attached to an active ride)
#vehicle accessibility features vs the ride's special requirements
#Output: "rule-qualified drivers" in the order they were given (still not ranked).

from typing import AbstractSet, Iterable, List

from drivers.models import Driver


def satisfies_requirements(driver: Driver, requirements: AbstractSet[str], match_mode: str = "any") -> bool:
    """
    True when the driver's accessibility features cover the requirements
    under the given mode. Nothing requested means anyone qualifies.
    """
    if not requirements:
        return True

    features = driver.accessibility_features
    if match_mode == "all":
        return requirements <= features
    return not features.isdisjoint(requirements)


def build_base_candidates(
    drivers: Iterable[Driver],
    requirements: AbstractSet[str],
    match_mode: str = "any",
) -> List[Driver]:
    """
    Returns only drivers who are available and carry the requested features.
    """
    eligible = []

    for driver in drivers:
        if not driver.is_available:
            continue

        if not satisfies_requirements(driver, requirements, match_mode):
            continue

        eligible.append(driver)

    return eligible
