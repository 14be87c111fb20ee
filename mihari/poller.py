"""
Polling loop.

Reads the serving cell on a fixed interval and hands each reading to a forwarder.
"""

import logging
import threading
import time
from typing import Optional

from .forwarder import Forwarder
from .modem import ModemSession
from .types import CellInfo
from .exceptions import ATParseError, ForwarderError, NotAttached

logger = logging.getLogger(__name__)


class Poller:
    """
    Fixed-interval poller.

    Cycles never overlap: an overrunning cycle delays the next one, and
    missed ticks are not queued. Retrying a failed cycle is left to the
    next tick.
    """

    def __init__(self, session: ModemSession, forwarder: Forwarder, interval: float) -> None:
        """
        Initialize poller.

        Args:
            session: Initialized modem session
            forwarder: Destination of each reading
            interval: Seconds between cycle starts
        """
        self.session = session
        self.forwarder = forwarder
        self.interval = interval
        self._stop_event = threading.Event()

    def run_once(self) -> Optional[CellInfo]:
        """
        Run one poll cycle.

        Returns:
            The forwarded cell info, or None if this cycle produced none

        Raises:
            TransportUnavailable: If the serial line failed
        """
        try:
            cell_info = self.session.refresh_cell_info()
        except NotAttached:
            logger.info("Modem is not attached to a network, no cell info this cycle")
            return None
        except ATParseError as e:
            logger.warning(f"Cell info decode failed: {e}")
            return None

        if cell_info is None:
            logger.info(f"No cell info for {self.session.rat.value if self.session.rat else 'unknown RAT'}")
            return None

        try:
            self.forwarder.send(cell_info.to_payload())
        except ForwarderError as e:
            logger.error(f"Cell info not forwarded: {e}")
            return None
        return cell_info

    def run(self) -> None:
        """
        Poll until stop() is called.

        Raises:
            TransportUnavailable: If the serial line failed; the loop stops
        """
        logger.info(f"Polling every {self.interval}s")
        next_tick = time.monotonic() + self.interval

        while not self._stop_event.wait(max(0.0, next_tick - time.monotonic())):
            self.run_once()

            next_tick += self.interval
            now = time.monotonic()
            if next_tick < now:
                logger.warning(f"Poll cycle overran the {self.interval}s interval")
                next_tick = now

        logger.info("Polling stopped")

    def stop(self) -> None:
        """Stop the loop; interrupts the wait between cycles."""
        self._stop_event.set()

    @property
    def is_stopped(self) -> bool:
        return self._stop_event.is_set()
