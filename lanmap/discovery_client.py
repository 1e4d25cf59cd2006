"""LAN device discovery client for LanMap."""

from __future__ import annotations

import logging
from typing import Any

import requests

from lanmap.config import Config
from lanmap.models import NetworkDevice

logger = logging.getLogger(__name__)


class DiscoveryError(Exception):
    """Discovery endpoint error."""
    pass


class DiscoveryClient:
    """Client for the device discovery REST endpoint.

    The endpoint answers a plain ``GET`` with a JSON array of device
    objects (``uid``, ``ip``, ``friendly_name``, ``online`` ...).  No
    query parameters, auth headers or pagination are involved.
    """

    def __init__(self, config: Config):
        self.config = config
        dcfg = config.discovery
        self.endpoint = dcfg.endpoint
        self._timeout = dcfg.timeout
        self._verify_ssl = dcfg.verify_ssl
        self._session = requests.Session()
        self._session.verify = self._verify_ssl

        if not self._verify_ssl:
            import urllib3
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def _get(self) -> Any:
        """Perform the GET request and decode the JSON body."""
        logger.info("Fetching devices from %s", self.endpoint)
        try:
            resp = self._session.get(self.endpoint, timeout=self._timeout)
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as e:
            raise DiscoveryError(f"Device discovery request failed: {e}")
        except ValueError as e:
            raise DiscoveryError(f"Device discovery returned invalid JSON: {e}")

    def get_devices(self) -> list[NetworkDevice]:
        """Fetch every device known to the endpoint."""
        body = self._get()
        if not isinstance(body, list):
            raise DiscoveryError(
                f"Expected a JSON array of devices, got {type(body).__name__}"
            )

        devices = [
            NetworkDevice.from_dict(item) for item in body if isinstance(item, dict)
        ]
        skipped = len(body) - len(devices)
        if skipped:
            logger.warning("Ignored %d non-object entries in device list", skipped)
        logger.info("Received %d devices", len(devices))
        return devices
