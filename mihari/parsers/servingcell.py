"""
Serving cell response parsers.

Parses AT+QENG="servingcell" responses: state/RAT classification and the
per-RAT detail records.
"""

import logging
import re
import time
from dataclasses import asdict
from enum import Enum
from typing import Any, Callable, Generic, Type, TypeVar

from .base import (
    HEX,
    FieldSpec,
    RecordSchema,
    ResponseParser,
    alternatives,
    to_str,
)
from ..types import (
    DuplexMode,
    LTECellInfo,
    RadioAccessTechnology,
    ServingCellState,
    WCDMACellInfo,
)
from ..exceptions import ModeNotResponded, NotAttached, RATNotResponded

logger = logging.getLogger(__name__)

R = TypeVar('R')

SERVINGCELL_PREFIX = '+QENG: "servingcell",'


def now_millis() -> int:
    """Current UTC time as epoch milliseconds."""
    return time.time_ns() // 1_000_000


def to_enum(enum_cls: Type[Enum]) -> Callable[[str, str], Any]:
    """Converter producing members of enum_cls from their wire value."""
    def convert(field: str, token: str) -> Enum:
        return enum_cls(token)
    return convert


def enum_field(name: str, enum_cls: Type[Enum], *members: Enum) -> FieldSpec:
    """Quoted, non-sentinel field restricted to enum members."""
    values = [m.value for m in (members or enum_cls)]
    return FieldSpec(
        name,
        token=alternatives(values),
        convert=to_enum(enum_cls),
        sentinel=False,
        quoted=True,
    )


def text_field(name: str) -> FieldSpec:
    """Alphanumeric identifier kept as text ("-" becomes "")."""
    return FieldSpec(name, token=HEX, convert=to_str, zero="")


def lte_schema() -> RecordSchema:
    """
    Field layout of an LTE serving cell line.

    +QENG: "servingcell",<state>,"LTE",<is_tdd>,<mcc>,<mnc>,<cellid>,<pcid>,<earfcn>,
    <freq_band_ind>,<ul_bandwidth>,<dl_bandwidth>,<tac>,<rsrp>,<rsrq>,<rssi>,<sinr>,<srxlev>
    """
    return RecordSchema(SERVINGCELL_PREFIX, [
        enum_field("state", ServingCellState),
        enum_field("rat", RadioAccessTechnology, RadioAccessTechnology.LTE),
        enum_field("is_tdd", DuplexMode),
        FieldSpec("mcc"),
        FieldSpec("mnc"),
        text_field("cell_id"),
        FieldSpec("pcid"),
        FieldSpec("earfcn"),
        FieldSpec("band"),
        FieldSpec("ul_bandwidth"),
        FieldSpec("dl_bandwidth"),
        FieldSpec("tac"),
        FieldSpec("rsrp"),
        FieldSpec("rsrq"),
        FieldSpec("rssi"),
        FieldSpec("sinr"),
        FieldSpec("srxlev"),
    ])


def wcdma_schema() -> RecordSchema:
    """
    Field layout of a WCDMA serving cell line.

    +QENG: "servingcell",<state>,"WCDMA",<mcc>,<mnc>,<lac>,<cellid>,<uarfcn>,<psc>,<rac>,
    <rscp>,<ecio>,<phych>,<sf>,<slot>,<speech_code>,<com_mod>
    """
    return RecordSchema(SERVINGCELL_PREFIX, [
        enum_field("state", ServingCellState),
        enum_field("rat", RadioAccessTechnology, RadioAccessTechnology.WCDMA),
        FieldSpec("mcc"),
        FieldSpec("mnc"),
        text_field("lac"),
        text_field("cell_id"),
        FieldSpec("uarfcn"),
        FieldSpec("psc"),
        FieldSpec("rac"),
        FieldSpec("rscp"),
        FieldSpec("ecio"),
        FieldSpec("phych"),
        FieldSpec("sf"),
        FieldSpec("slot"),
        FieldSpec("speech_code"),
        FieldSpec("com_mod"),
    ])


class ServingCellModeParser(ResponseParser[tuple[ServingCellState, RadioAccessTechnology]]):
    """
    Classifies an AT+QENG="servingcell" response.

    SEARCH is checked first and wins over anything else in the buffer.
    """

    def __init__(self) -> None:
        marker = re.escape(SERVINGCELL_PREFIX)
        self.search_regex = re.compile(marker + re.escape(f'"{ServingCellState.SEARCH.value}"'))
        self.state_regex = re.compile(
            marker + f'"(?P<state>{alternatives([s.value for s in ServingCellState])})"'
        )
        self.rat_regex = re.compile(
            self.state_regex.pattern
            + f',"(?P<rat>{alternatives([r.value for r in RadioAccessTechnology])})"'
        )

    def parse(self, text: str) -> tuple[ServingCellState, RadioAccessTechnology]:
        """
        Parse serving cell state and RAT.

        Raises:
            NotAttached: If the state is SEARCH
            ModeNotResponded: If the servingcell marker or a known state is missing
            RATNotResponded: If the state is present but the RAT is not
        """
        if self.search_regex.search(text):
            raise NotAttached("modem is not attached to a network", response=text)

        state_match = self.state_regex.search(text)
        if state_match is None:
            raise ModeNotResponded("servingcell mode info was not responded", response=text)

        rat_match = self.rat_regex.search(text)
        if rat_match is None:
            raise RATNotResponded(
                f"servingcell RAT was not responded (state {state_match.group('state')})",
                response=text
            )

        state = ServingCellState(rat_match.group("state"))
        rat = RadioAccessTechnology(rat_match.group("rat"))
        logger.debug(f"Serving cell state={state.value} rat={rat.value}")
        return state, rat


class CellInfoParser(ResponseParser[R], Generic[R]):
    """
    Decodes one RAT's serving cell line into its record type.

    The record's timestamp is the moment of successful decode.
    """

    def __init__(
        self,
        schema: RecordSchema,
        record_type: Type[R],
        clock: Callable[[], int] = now_millis
    ) -> None:
        """
        Initialize parser.

        Args:
            schema: Field layout of the line
            record_type: Dataclass built from the decoded fields
            clock: Source of capture timestamps (epoch milliseconds)
        """
        self.schema = schema
        self.record_type = record_type
        self.clock = clock

    def parse(self, text: str) -> R:
        """Decode the serving cell line into a record."""
        values = self.schema.decode(text)
        record = self.record_type(timestamp=self.clock(), **values)
        logger.debug(f"Decoded {record}")
        return record

    def format(self, record: R) -> str:
        """Render a record back into its wire line (timestamp is not on the wire)."""
        values = asdict(record)
        values.pop("timestamp")
        return self.schema.format(values)


def lte_parser(clock: Callable[[], int] = now_millis) -> CellInfoParser[LTECellInfo]:
    """Build the LTE detail parser."""
    return CellInfoParser(lte_schema(), LTECellInfo, clock=clock)


def wcdma_parser(clock: Callable[[], int] = now_millis) -> CellInfoParser[WCDMACellInfo]:
    """Build the WCDMA detail parser."""
    return CellInfoParser(wcdma_schema(), WCDMACellInfo, clock=clock)
