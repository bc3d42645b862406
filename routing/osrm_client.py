#Purpose: The OSRM "adapter/client".
#Sole responsibility: talk to OSRM via HTTP and return normalized outputs.
#Encapsulates OSRM-specific details:
#coordinate formatting (lon,lat)
#URL construction (/route, /table)
#timeouts and error handling
#parsing response JSON into our internal shape
#It should not contain matching rules or ride state.


from dotenv import load_dotenv
import logging
import os
from typing import Dict, List, Optional, Tuple
import requests

# Read OSRM base URL from environment
# Example in .env:
# OSRM_BASE_URL=http://router.project-osrm.org
load_dotenv()

logger = logging.getLogger(__name__)

# Internal coordinate type: (lat, lon)
LatLon = Tuple[float, float]


class OSRMError(Exception):
    """Raised when OSRM answers with anything but code=Ok, or cannot be reached."""
    pass


def osrm_base_url() -> Optional[str]:
    return os.getenv("OSRM_BASE_URL")


class OSRMClient:
    """
    OSRM Adapter / Client

    Sole responsibility:
    - Talk to OSRM via HTTP
    - Convert internal (lat, lon) -> OSRM (lon,lat)
    - Return normalized outputs
    """
    def __init__(self, base_url: Optional[str] = None, profile: str = "driving", timeout: int = 5):
        self.base_url = base_url or osrm_base_url()
        self.timeout = timeout  # seconds to wait for OSRM before giving up
        self.profile = profile  # driving, walking, cycling

        if not self.base_url:
            raise ValueError("OSRM base URL not set. Please set OSRM_BASE_URL in the .env file.")
        self.base_url = self.base_url.rstrip("/")

    #----------------
    # Internal helpers
    #----------------
    def format_coordinates(self, coords: List[LatLon]) -> str:
        """Convert list of (lat, lon) to OSRM format 'lon,lat;lon,lat;...'"""
        return ";".join(f"{lon},{lat}" for lat, lon in coords)

    def _get(self, url: str, params: Dict[str, str]) -> dict:
        try:
            response = requests.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("OSRM unreachable at %s: %s", self.base_url, exc)
            raise OSRMError(f"OSRM request failed: {exc}") from exc

        # Proxies in front of OSRM answer 502/504 with HTML pages.
        try:
            data = response.json()
        except ValueError as exc:
            logger.warning("OSRM at %s sent a non-JSON answer (HTTP %s)", self.base_url, response.status_code)
            raise OSRMError(f"OSRM returned a non-JSON response (HTTP {response.status_code})") from exc

        if data.get("code") != "Ok":
            raise OSRMError(f"OSRM error: {data.get('message', 'Unknown error')}")
        return data

    #----------------
    # route service
    #----------------
    def compute_route(self, coordinates: List[LatLon]) -> Dict[str, float]:
        """
        Calls the OSRM /route endpoint and returns distance and duration.

        Returns:
            {
                "distance": float, # in meters
                "duration": float, # in seconds
            }
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required to compute a route.")

        url = f"{self.base_url}/route/v1/{self.profile}/{self.format_coordinates(coordinates)}"
        data = self._get(url, {"overview": "false"})

        route = data["routes"][0]  # OSRM may return alternatives, first is best
        return {
            "distance": route["distance"],
            "duration": route["duration"],
        }

    #----------------
    # table service (batch routing)
    #----------------
    def compute_table(self, sources: List[LatLon], destinations: List[LatLon]) -> Dict[str, List[List[float]]]:
        """
        Calls the OSRM /table endpoint.
        Used to put road durations on nearby drivers in one request.

        Returns:
            {
                "durations": [[seconds, ...], ...],  # one row per source
                "distances": [[meters, ...], ...],
            }
        """
        if not sources or not destinations:
            return {"durations": [], "distances": []}

        coordinates = self.format_coordinates(sources + destinations)
        source_index = ";".join(str(i) for i in range(len(sources)))
        destination_index = ";".join(
            str(i) for i in range(len(sources), len(sources) + len(destinations))
        )
        params = {
            "sources": source_index,
            "destinations": destination_index,
            "annotations": "duration,distance",
        }

        url = f"{self.base_url}/table/v1/{self.profile}/{coordinates}"
        data = self._get(url, params)

        return {
            "durations": data["durations"],
            "distances": data["distances"],
        }
