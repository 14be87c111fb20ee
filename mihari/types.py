"""
Data types and structures for mihari.

Provides type-safe representations of modem identity and serving cell data.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Union


class RadioAccessTechnology(Enum):
    """Radio access technology reported by AT+QENG="servingcell"."""
    GSM = "GSM"
    WCDMA = "WCDMA"
    LTE = "LTE"
    CDMAHDR = "CDMAHDR"
    TDSCDMA = "TDSCDMA"


class ServingCellState(Enum):
    """Serving cell state reported by AT+QENG="servingcell"."""
    SEARCH = "SEARCH"    # No network attachment
    LIMSRV = "LIMSRV"    # Camped, limited service
    NOCONN = "NOCONN"    # Camped, idle
    CONNECT = "CONNECT"  # Camped, connection established


class DuplexMode(Enum):
    """LTE duplex mode."""
    TDD = "TDD"
    FDD = "FDD"


@dataclass
class ModemIdentity:
    """Modem and SIM identity, populated once when the session starts."""
    manufacturer: str = ""       # e.g., "Quectel"
    model: str = ""              # e.g., "EG25"
    firmware_revision: str = ""  # e.g., "EG25GGBR07A08M2G"
    imei: str = ""               # 15 digits
    imsi: str = ""               # 15 digits
    iccid: str = ""              # 19 digits, "F" padding stripped


class _CellInfoPayload:
    """
    Flat JSON payload rendering shared by cell info records.

    Zero and empty measurements are omitted; fields listed in
    ``always_present`` are kept regardless.
    """

    always_present: ClassVar[tuple[str, ...]] = ("timestamp", "rat", "state")
    wire_names: ClassVar[dict[str, str]] = {"timestamp": "time"}

    def to_payload(self) -> dict[str, Any]:
        """Render the record as a flat dict ready for JSON encoding."""
        payload: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            if f.name not in self.always_present and value in (0, ""):
                continue
            payload[self.wire_names.get(f.name, f.name)] = value
        return payload


@dataclass
class LTECellInfo(_CellInfoPayload):
    """
    LTE serving cell info from AT+QENG="servingcell".

    Example line:
        +QENG: "servingcell","NOCONN","LTE","FDD",440,10,2734811,235,6100,19,3,3,1684,-81,-10,-54,19,50
    """
    always_present: ClassVar[tuple[str, ...]] = ("timestamp", "rat", "state", "is_tdd")
    wire_names: ClassVar[dict[str, str]] = {
        "timestamp": "time",
        "cell_id": "cellid",
        "band": "freq_band_ind",
    }

    timestamp: int                 # Capture time, UTC epoch milliseconds
    state: ServingCellState
    is_tdd: DuplexMode
    rat: RadioAccessTechnology = RadioAccessTechnology.LTE
    mcc: int = 0
    mnc: int = 0
    cell_id: str = ""              # Hex, variable width
    pcid: int = 0                  # Physical cell ID
    earfcn: int = 0
    band: int = 0
    ul_bandwidth: int = 0          # 0..5
    dl_bandwidth: int = 0          # 0..5
    tac: int = 0
    rsrp: int = 0
    rsrq: int = 0
    rssi: int = 0
    sinr: int = 0
    srxlev: int = 0


@dataclass
class WCDMACellInfo(_CellInfoPayload):
    """
    WCDMA serving cell info from AT+QENG="servingcell".

    Example line:
        +QENG: "servingcell","NOCONN","WCDMA",440,10,75,6FE0090,10736,58,0,-78,-3,-,-,-,-,-
    """
    wire_names: ClassVar[dict[str, str]] = {
        "timestamp": "time",
        "cell_id": "cellid",
    }

    timestamp: int
    state: ServingCellState
    rat: RadioAccessTechnology = RadioAccessTechnology.WCDMA
    mcc: int = 0
    mnc: int = 0
    lac: str = ""                  # Location area code, hex
    cell_id: str = ""              # Hex
    uarfcn: int = 0
    psc: int = 0                   # Primary scrambling code
    rac: int = 0                   # Routing area code
    rscp: int = 0
    ecio: int = 0
    phych: int = 0                 # Physical channel flag
    sf: int = 0                    # Spreading factor code
    slot: int = 0
    speech_code: int = 0
    com_mod: int = 0               # Compressed mode flag


# Tagged variant: the ``rat`` field is the tag.
CellInfo = Union[LTECellInfo, WCDMACellInfo]
