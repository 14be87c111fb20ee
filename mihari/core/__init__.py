"""
Core modem infrastructure.

Provides low-level building blocks for modem communication:
- Transport: Serial communication abstraction
- Protocol: AT command execution
"""

from .transport import Transport, SerialTransport, MockTransport, SerialSettings
from .protocol import ATProtocol, NEWLINE_CODES

__all__ = [
    "Transport",
    "SerialTransport",
    "MockTransport",
    "SerialSettings",
    "ATProtocol",
    "NEWLINE_CODES",
]
