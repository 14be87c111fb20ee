"""
Telemetry forwarders.

Deliver cell info payloads to a remote collector.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import requests

from .config import DEFAULT_HARVEST_URL
from .exceptions import ConfigError, ForwarderError

logger = logging.getLogger(__name__)


class Forwarder(ABC):
    """Abstract base class for telemetry forwarders."""

    @abstractmethod
    def send(self, payload: dict[str, Any]) -> None:
        """
        Deliver one payload.

        Args:
            payload: Flat JSON-serializable dict

        Raises:
            ForwarderError: If delivery fails
        """
        pass

    def close(self) -> None:
        """Release any connection resources."""
        pass


class HarvestForwarder(Forwarder):
    """
    Posts JSON payloads to SORACOM Harvest.

    The collector identifies the device by its SIM, so no credentials are sent.
    """

    def __init__(
        self,
        url: str = DEFAULT_HARVEST_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None
    ) -> None:
        """
        Initialize forwarder.

        Args:
            url: Collector endpoint
            timeout: HTTP timeout in seconds
            session: requests session to reuse (default: a new one)
        """
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

    def send(self, payload: dict[str, Any]) -> None:
        """POST payload as JSON."""
        body = json.dumps(payload)
        try:
            response = self._session.post(self.url, data=body, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Forwarding to {self.url} failed: {e}")
            raise ForwarderError(f"forwarding to {self.url} failed, {e}", response=body) from e
        logger.info(f"Forwarded {body} -> {response.status_code}")

    def close(self) -> None:
        self._session.close()


class LogForwarder(Forwarder):
    """Writes payloads to the log instead of sending them anywhere."""

    def send(self, payload: dict[str, Any]) -> None:
        logger.info(json.dumps(payload))


def create_forwarder(name: str, url: str = DEFAULT_HARVEST_URL) -> Forwarder:
    """
    Build the forwarder selected in the config.

    Raises:
        ConfigError: If name is unknown
    """
    if name == "harvest":
        return HarvestForwarder(url=url)
    if name == "log":
        return LogForwarder()
    raise ConfigError(f"unknown forwarder {name!r}, expected 'harvest' or 'log'")
