"""
mihari - cellular modem serving cell telemetry over AT commands.
"""

from .version import __version__
from .modem import ModemSession
from .core import SerialSettings, SerialTransport, MockTransport
from .poller import Poller

from .types import (
    ModemIdentity,
    RadioAccessTechnology,
    ServingCellState,
    DuplexMode,
    LTECellInfo,
    WCDMACellInfo,
    CellInfo,
)

from .exceptions import (
    MihariError,
    TransportUnavailable,
    ATParseError,
    NotAttached,
    ModeNotResponded,
    RATNotResponded,
    FieldNotPresent,
    IdentityNotPresent,
    NumericConversionFailed,
    UnsupportedModel,
    ConfigError,
    ForwarderError,
)

__all__ = [
    "__version__",
    "ModemSession",
    "SerialSettings",
    "SerialTransport",
    "MockTransport",
    "Poller",
    "ModemIdentity",
    "RadioAccessTechnology",
    "ServingCellState",
    "DuplexMode",
    "LTECellInfo",
    "WCDMACellInfo",
    "CellInfo",
    "MihariError",
    "TransportUnavailable",
    "ATParseError",
    "NotAttached",
    "ModeNotResponded",
    "RATNotResponded",
    "FieldNotPresent",
    "IdentityNotPresent",
    "NumericConversionFailed",
    "UnsupportedModel",
    "ConfigError",
    "ForwarderError",
]
