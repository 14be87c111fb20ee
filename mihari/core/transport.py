"""
Transport layer abstraction for modem communication.

Provides abstractions for serial communication with dependency injection support.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass

import serial
from serial import SerialException

from ..exceptions import TransportUnavailable

logger = logging.getLogger(__name__)

# Minimum read timeout in seconds
MIN_READ_TIMEOUT = 1.0

PARITIES = {
    "none": serial.PARITY_NONE,
    "even": serial.PARITY_EVEN,
    "odd": serial.PARITY_ODD,
    "mark": serial.PARITY_MARK,
    "space": serial.PARITY_SPACE,
}

STOPBITS = {
    1: serial.STOPBITS_ONE,
    1.5: serial.STOPBITS_ONE_POINT_FIVE,
    2: serial.STOPBITS_TWO,
}

BYTESIZES = {
    5: serial.FIVEBITS,
    6: serial.SIXBITS,
    7: serial.SEVENBITS,
    8: serial.EIGHTBITS,
}


@dataclass(frozen=True)
class SerialSettings:
    """Serial line parameters."""
    port: str
    baudrate: int = 115200
    parity: str = "none"
    databits: int = 8
    stopbits: float = 1
    read_timeout: float = MIN_READ_TIMEOUT


class Transport(ABC):
    """Abstract base class for modem transport."""

    port: str = ""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """
        Write data to the transport.

        Args:
            data: Bytes to write

        Returns:
            Number of bytes written

        Raises:
            TransportUnavailable: If write fails
        """
        pass

    @abstractmethod
    def read(self, size: int) -> bytes:
        """
        Read up to ``size`` bytes, blocking until the read timeout.

        Args:
            size: Maximum number of bytes to read

        Returns:
            Bytes read, or b"" on timeout

        Raises:
            TransportUnavailable: If read fails
        """
        pass

    @abstractmethod
    def reset_input_buffer(self) -> None:
        """Clear the input buffer."""
        pass

    @abstractmethod
    def reset_output_buffer(self) -> None:
        """Clear the output buffer."""
        pass

    @abstractmethod
    def is_open(self) -> bool:
        """Check if transport is open."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the transport."""
        pass


class SerialTransport(Transport):
    """Serial port transport implementation."""

    def __init__(self, settings: SerialSettings) -> None:
        """
        Open the serial port.

        Args:
            settings: Serial line parameters

        Raises:
            TransportUnavailable: If serial port cannot be opened or configured
        """
        self.settings = settings
        self.port = settings.port

        timeout = settings.read_timeout
        if timeout < MIN_READ_TIMEOUT:
            logger.info(f"read_timeout is set {MIN_READ_TIMEOUT} (sec)")
            timeout = MIN_READ_TIMEOUT

        try:
            self._serial = serial.Serial(
                port=settings.port,
                baudrate=settings.baudrate,
                parity=PARITIES[settings.parity],
                bytesize=BYTESIZES[settings.databits],
                stopbits=STOPBITS[settings.stopbits],
                timeout=timeout
            )
            logger.info(
                f"Opened serial port {settings.port} at {settings.baudrate} baud "
                f"({settings.databits}{settings.parity[0].upper()}{settings.stopbits})"
            )
        except (SerialException, ValueError, KeyError) as e:
            logger.error(f"Failed to open serial port {settings.port}: {e}")
            raise TransportUnavailable(settings.port, f"could not open, {e}") from e

    def write(self, data: bytes) -> int:
        """Write data to serial port."""
        try:
            written = self._serial.write(data)
            logger.debug(f"Wrote {written} bytes: {data}")
            return written
        except SerialException as e:
            logger.error(f"Serial write failed: {e}")
            raise TransportUnavailable(self.port, f"write failed, {e}") from e

    def read(self, size: int) -> bytes:
        """Read up to size bytes from serial port."""
        try:
            data = self._serial.read(size)
        except SerialException as e:
            logger.error(f"Serial read failed: {e}")
            raise TransportUnavailable(self.port, f"read failed, {e}") from e

        if data:
            logger.debug(f"Read {len(data)} bytes: {data}")
        return data

    def reset_input_buffer(self) -> None:
        """Clear the serial input buffer."""
        try:
            self._serial.reset_input_buffer()
            logger.debug("Reset input buffer")
        except SerialException as e:
            logger.error(f"Failed to reset input buffer: {e}")
            raise TransportUnavailable(self.port, f"input buffer reset failed, {e}") from e

    def reset_output_buffer(self) -> None:
        """Clear the serial output buffer."""
        try:
            self._serial.reset_output_buffer()
            logger.debug("Reset output buffer")
        except SerialException as e:
            logger.error(f"Failed to reset output buffer: {e}")
            raise TransportUnavailable(self.port, f"output buffer reset failed, {e}") from e

    def is_open(self) -> bool:
        """Check if serial port is open."""
        return bool(self._serial and self._serial.is_open)

    def close(self) -> None:
        """
        Close the serial port.

        Safe to call from another thread while a read is blocked.
        """
        if not self.is_open():
            return

        # Only the POSIX backend can interrupt a blocked read
        cancel_read = getattr(self._serial, "cancel_read", None)
        if cancel_read is not None:
            cancel_read()

        self._serial.close()
        logger.info(f"Closed serial port {self.port}")


class MockTransport(Transport):
    """
    Mock transport for testing.

    Simulates modem responses without requiring hardware. Each queued
    response is released into the input buffer when a command is written.
    """

    def __init__(self, port: str = "/dev/mock") -> None:
        """Initialize mock transport."""
        self.port = port
        self._open = True
        self._input_buffer = bytearray()
        self._response_queue: list[bytes] = []
        self.written: list[bytes] = []
        self.resets = 0
        self._lock = threading.Lock()
        logger.info("Initialized MockTransport")

    def add_response(self, lines: list[str], newline: str = "\r\n") -> None:
        """
        Queue a response released by the next write.

        Args:
            lines: List of response lines (e.g., ["861536030196001", "", "OK"])
            newline: Line terminator appended to every line
        """
        self.add_raw("".join(line + newline for line in lines).encode("utf-8"))

    def add_raw(self, data: bytes) -> None:
        """Queue raw bytes released by the next write."""
        with self._lock:
            self._response_queue.append(data)
            logger.debug(f"Added mock response: {data}")

    def feed(self, data: bytes) -> None:
        """Put bytes straight into the input buffer (unsolicited/stale data)."""
        with self._lock:
            self._input_buffer.extend(data)

    def write(self, data: bytes) -> int:
        """Simulate writing a command; releases the next queued response."""
        if not self._open:
            raise TransportUnavailable(self.port, "is closed")

        logger.debug(f"Mock write: {data}")
        with self._lock:
            self.written.append(data)
            if self._response_queue:
                self._input_buffer.extend(self._response_queue.pop(0))
        return len(data)

    def read(self, size: int) -> bytes:
        """Return up to size bytes of released data, or b"" on 'timeout'."""
        if not self._open:
            raise TransportUnavailable(self.port, "is closed")

        with self._lock:
            data = bytes(self._input_buffer[:size])
            del self._input_buffer[:size]

        if data:
            logger.debug(f"Mock read: {data}")
        return data

    def reset_input_buffer(self) -> None:
        """Discard released but unread bytes."""
        with self._lock:
            self._input_buffer.clear()
            self.resets += 1
            logger.debug("Reset mock input buffer")

    def reset_output_buffer(self) -> None:
        """Nothing is buffered on the output side of the mock."""
        logger.debug("Reset mock output buffer")

    def is_open(self) -> bool:
        """Check if mock transport is open."""
        return self._open

    def close(self) -> None:
        """Close mock transport."""
        self._open = False
        logger.info("Closed MockTransport")

    def pending(self) -> int:
        """Number of queued responses not yet released."""
        with self._lock:
            return len(self._response_queue)
