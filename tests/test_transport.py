"""
Tests for transport layer.
"""

import pytest
from unittest import mock

from serial import SerialException

from mihari.core import MockTransport, SerialSettings, SerialTransport
from mihari.exceptions import TransportUnavailable


def test_mock_transport_write():
    """Test MockTransport write operation."""
    transport = MockTransport()

    written = transport.write(b"AT\r\n")
    assert written == 4  # AT\r\n is 4 bytes
    assert transport.written == [b"AT\r\n"]

    transport.close()


def test_mock_transport_response_released_by_write():
    """Test queued responses only become readable after a command is written."""
    transport = MockTransport()
    transport.add_response(["OK"])

    # Nothing released yet
    assert transport.read(100) == b""

    transport.write(b"AT\r\n")
    assert transport.read(100) == b"OK\r\n"

    transport.close()


def test_mock_transport_read_respects_size():
    """Test MockTransport returns at most size bytes per read."""
    transport = MockTransport()
    transport.add_response(["861536030196001", "OK"])
    transport.write(b"AT+CGSN\r\n")

    assert transport.read(5) == b"86153"
    assert transport.read(100) == b"6030196001\r\nOK\r\n"
    assert transport.read(100) == b""

    transport.close()


def test_mock_transport_reset_discards_stale_bytes():
    """Test reset_input_buffer drops released bytes but keeps queued responses."""
    transport = MockTransport()
    transport.feed(b"RDY\r\n")
    transport.add_response(["OK"])

    transport.reset_input_buffer()
    assert transport.read(100) == b""
    assert transport.pending() == 1
    assert transport.resets == 1

    transport.write(b"AT\r\n")
    assert transport.read(100) == b"OK\r\n"

    transport.close()


def test_mock_transport_is_open():
    """Test MockTransport is_open status."""
    transport = MockTransport()

    assert transport.is_open() is True

    transport.close()
    assert transport.is_open() is False


def test_mock_transport_write_when_closed():
    """Test MockTransport raises error when writing to closed transport."""
    transport = MockTransport(port="/dev/ttyUSB9")
    transport.close()

    with pytest.raises(TransportUnavailable) as exc_info:
        transport.write(b"AT\r\n")

    assert exc_info.value.port == "/dev/ttyUSB9"


@mock.patch("mihari.core.transport.serial.Serial")
def test_serial_transport_opens_with_mode(serial_cls):
    """Test SerialTransport passes the configured line parameters to pyserial."""
    settings = SerialSettings(
        port="/dev/ttyUSB3",
        baudrate=9600,
        parity="even",
        databits=7,
        stopbits=2,
        read_timeout=0.2
    )

    transport = SerialTransport(settings)

    serial_cls.assert_called_once_with(
        port="/dev/ttyUSB3",
        baudrate=9600,
        parity="E",
        bytesize=7,
        stopbits=2,
        timeout=1.0  # Raised to the one second floor
    )
    assert transport.port == "/dev/ttyUSB3"


@mock.patch("mihari.core.transport.serial.Serial", side_effect=SerialException("no such file"))
def test_serial_transport_open_failure(serial_cls):
    """Test an unopenable port raises TransportUnavailable naming the port."""
    with pytest.raises(TransportUnavailable) as exc_info:
        SerialTransport(SerialSettings(port="/dev/ttyUSB7"))

    assert exc_info.value.port == "/dev/ttyUSB7"
    assert "/dev/ttyUSB7" in str(exc_info.value)


@mock.patch("mihari.core.transport.serial.Serial")
def test_serial_transport_read_failure(serial_cls):
    """Test read errors surface as TransportUnavailable."""
    serial_cls.return_value.read.side_effect = SerialException("device disconnected")
    transport = SerialTransport(SerialSettings(port="/dev/ttyUSB3"))

    with pytest.raises(TransportUnavailable):
        transport.read(100)


@mock.patch("mihari.core.transport.serial.Serial")
def test_serial_transport_close_cancels_blocked_read(serial_cls):
    """Test close interrupts a pending read before closing the port."""
    port = serial_cls.return_value
    port.is_open = True
    transport = SerialTransport(SerialSettings(port="/dev/ttyUSB3"))

    transport.close()

    port.cancel_read.assert_called_once()
    port.close.assert_called_once()


@mock.patch("mihari.core.transport.serial.Serial")
def test_serial_transport_close_twice(serial_cls):
    """Test closing an already closed port is a no-op."""
    port = serial_cls.return_value
    port.is_open = False
    transport = SerialTransport(SerialSettings(port="/dev/ttyUSB3"))

    transport.close()

    port.close.assert_not_called()
