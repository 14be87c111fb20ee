"""
AT command protocol handler.

Executes one AT command per call and collects the raw response.
"""

import logging
import threading
import time
from typing import Callable, Optional

from .transport import Transport
from ..exceptions import TransportUnavailable

logger = logging.getLogger(__name__)

NEWLINE_CODES = {
    "crlf": b"\r\n",
    "cr": b"\r",
    "lf": b"\n",
}

# Large enough for every response in scope; longer ones span several chunks
DEFAULT_CHUNK_SIZE = 100

# Predicate over the decoded response collected so far
CompletionCheck = Callable[[str], bool]


class ATProtocol:
    """
    AT command protocol handler.

    One transaction (write command, read response) at a time per transport.
    Holds no state between transactions; callers reset the transport buffers
    between independent commands.
    """

    def __init__(
        self,
        transport: Transport,
        newline: bytes = b"\r\n",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_wait: Optional[float] = None
    ) -> None:
        """
        Initialize AT protocol handler.

        Args:
            transport: Transport instance for communication
            newline: Terminator appended to every command
            chunk_size: Bytes requested per read
            max_wait: Upper bound in seconds on reading for a completion
                check; None waits until the transport times out
        """
        self.transport = transport
        self.newline = newline
        self.chunk_size = chunk_size
        self.max_wait = max_wait

        # Exclusive access to the line for a whole transaction
        self._at_lock = threading.Lock()

        logger.info("Initialized AT protocol handler")

    def execute(self, command: str, until: Optional[CompletionCheck] = None) -> bytes:
        """
        Send an AT command and collect the raw response.

        Without ``until`` the read stops as soon as a chunk contains a
        newline. With ``until`` the read continues across chunks until the
        check accepts the buffer; a partial response is never returned.

        Args:
            command: AT command without terminator (e.g., "AT+CGSN")
            until: Optional completion check over the decoded buffer

        Returns:
            Raw response bytes

        Raises:
            TransportUnavailable: If the write fails, a read times out before
                the response is complete, or max_wait elapses first
        """
        with self._at_lock:
            logger.debug(f"Sending AT command: {command}")
            self.transport.write(command.encode("utf-8") + self.newline)

            buffer = bytearray()
            deadline = None
            if until is not None and self.max_wait is not None:
                deadline = time.monotonic() + self.max_wait

            while True:
                chunk = self.transport.read(self.chunk_size)
                if not chunk:
                    logger.error(
                        f"{command} got no complete response from {self.transport.port}, "
                        f"{len(buffer)} bytes read"
                    )
                    raise TransportUnavailable(
                        self.transport.port,
                        command=command,
                        response=buffer.decode("utf-8", errors="replace")
                    )
                buffer.extend(chunk)

                if until is None:
                    if b"\n" in chunk:
                        break
                    continue

                if until(buffer.decode("utf-8", errors="replace")):
                    break
                if deadline is not None and time.monotonic() >= deadline:
                    logger.error(f"{command} response incomplete after {self.max_wait}s")
                    raise TransportUnavailable(
                        self.transport.port,
                        f"timed out after {self.max_wait}s",
                        command=command,
                        response=buffer.decode("utf-8", errors="replace")
                    )

            logger.debug(f"Received response: {bytes(buffer)}")
            return bytes(buffer)
