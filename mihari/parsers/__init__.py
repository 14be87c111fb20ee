"""
Response parsers for AT command responses.

Provides schema-driven parsing of modem responses into structured data.
"""

from .base import (
    FieldSpec,
    RecordSchema,
    ResponseParser,
    PatternParser,
    SENTINEL,
)
from .identity import IdentityParser, DigitRunParser, ICCIDParser
from .servingcell import (
    ServingCellModeParser,
    CellInfoParser,
    lte_schema,
    wcdma_schema,
    lte_parser,
    wcdma_parser,
)

__all__ = [
    "FieldSpec",
    "RecordSchema",
    "ResponseParser",
    "PatternParser",
    "SENTINEL",
    "IdentityParser",
    "DigitRunParser",
    "ICCIDParser",
    "ServingCellModeParser",
    "CellInfoParser",
    "lte_schema",
    "wcdma_schema",
    "lte_parser",
    "wcdma_parser",
]
