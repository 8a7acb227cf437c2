"""IPInfo client used to tag new transactions with a location."""

import os
from typing import Optional

import httpx

from finkeep.logging_setup import get_logger

logger = get_logger(__name__)

IPINFO_URL = "https://ipinfo.io/json"


class LocationClient:
    """Best-effort lookup of the caller's location.

    Every failure is logged and turned into ``None``; a missing location
    never stops a transaction from being recorded.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = IPINFO_URL,
        timeout: float = 3.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.token = token if token is not None else os.environ.get("FINKEEP_IPINFO_TOKEN")
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport

    def fetch_location(self) -> Optional[str]:
        """Return ``"city,region,country"`` or None."""
        if not self.token:
            logger.debug("FINKEEP_IPINFO_TOKEN not set, skipping location lookup")
            return None

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(self.base_url, params={"token": self.token})
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            logger.warning("Location lookup failed: %s", e)
            return None
        except ValueError as e:
            logger.warning("Invalid location data from IPInfo: %s", e)
            return None

        city = data.get("city") if isinstance(data, dict) else None
        region = data.get("region") if isinstance(data, dict) else None
        country = data.get("country") if isinstance(data, dict) else None
        if city and region and country:
            return f"{city},{region},{country}"

        logger.warning("Incomplete location data from IPInfo")
        return None
