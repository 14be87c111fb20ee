"""
Base parser classes and utilities.

Provides the declarative field schema that every response parser is built on.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar

from ..exceptions import ATParseError, FieldNotPresent, NumericConversionFailed

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Token the firmware sends for "not applicable/unavailable"
SENTINEL = "-"

# Token shapes
INTEGER = r"[^,\r\n]+"         # Validated by conversion, not by pattern
HEX = r"[0-9A-Za-z]+"
QUOTED = r'"{}"'

# Decimal integer as printed by the firmware
DECIMAL_REGEX = re.compile(r"-?[0-9]+")

# Final result codes that end every AT response
FINAL_RESULT_REGEX = re.compile(r"^(?:OK|ERROR|\+CM[ES] ERROR: ?[^\r\n]*)\r?\n", re.MULTILINE)


def alternatives(values: Sequence[str]) -> str:
    """Build a regex alternation matching any of the literal values."""
    return "|".join(re.escape(value) for value in values)


def to_int(field: str, token: str) -> int:
    """Convert a decimal token to int, naming the field on failure."""
    if DECIMAL_REGEX.fullmatch(token) is None:
        raise NumericConversionFailed(field, token)
    return int(token)


def to_str(field: str, token: str) -> str:
    """Identity conversion for text fields."""
    return token


@dataclass(frozen=True)
class FieldSpec:
    """
    One field of a comma separated response.

    Attributes:
        name: Field name, also the record attribute
        token: Regex for the raw token (no capture groups)
        convert: Callable(name, token) producing the typed value
        sentinel: Whether "-" is accepted and decodes to ``zero``
        quoted: Whether the token is wrapped in double quotes on the wire
        zero: Value substituted for the sentinel
    """
    name: str
    token: str = INTEGER
    convert: Callable[[str, str], Any] = to_int
    sentinel: bool = True
    quoted: bool = False
    zero: Any = 0

    def pattern(self) -> str:
        """Regex fragment capturing this field by name."""
        # Sentinel last, so "-81" is never cut down to "-"
        body = f"{self.token}|{re.escape(SENTINEL)}" if self.sentinel else self.token
        group = f"(?P<{self.name}>{body})"
        return QUOTED.format(group) if self.quoted else group

    def decode(self, token: str) -> Any:
        """Convert a raw token, mapping the sentinel to the zero value."""
        if self.sentinel and token == SENTINEL:
            return self.zero
        return self.convert(self.name, token)

    def encode(self, value: Any) -> str:
        """Render a typed value as its wire token."""
        if isinstance(value, Enum):
            value = value.value
        if self.sentinel and value == self.zero:
            token = SENTINEL
        else:
            token = str(value)
        return f'"{token}"' if self.quoted else token


class RecordSchema:
    """
    Ordered list of fields following a literal prefix.

    Compiles a single regex with one named group per field and decodes a
    match into a dict of typed values.

    Example:

    .. code-block:: python

        schema = RecordSchema('+QENG: "servingcell",', [
            FieldSpec("state", token="NOCONN|CONNECT", convert=to_str, sentinel=False, quoted=True),
            FieldSpec("mcc"),
        ])
        schema.decode('+QENG: "servingcell","NOCONN",440')  # {"state": "NOCONN", "mcc": 440}
    """

    def __init__(self, prefix: str, fields: Sequence[FieldSpec], separator: str = ",") -> None:
        """
        Initialize schema.

        Args:
            prefix: Literal text preceding the first field
            fields: Fields in wire order
            separator: Literal text between fields
        """
        self.prefix = prefix
        self.fields = tuple(fields)
        self.separator = separator

        body = re.escape(separator).join(f.pattern() for f in self.fields)
        self.regex = re.compile(re.escape(prefix) + body)

    @property
    def names(self) -> list[str]:
        """Field names in wire order."""
        return [f.name for f in self.fields]

    def search(self, text: str) -> Optional[re.Match]:
        """Find the first match anywhere in text."""
        return self.regex.search(text)

    def decode(self, text: str) -> dict[str, Any]:
        """
        Decode the first match in text.

        Raises:
            ATParseError: If the response does not have the schema's shape
            NumericConversionFailed: If a numeric field holds a non-number
        """
        match = self.search(text)
        if match is None:
            raise ATParseError(
                f"response does not match {self.prefix.strip()} format",
                response=text
            )
        return {f.name: f.decode(match.group(f.name)) for f in self.fields}

    def format(self, values: dict[str, Any]) -> str:
        """Render values back into the wire line (zero values as sentinel)."""
        return self.prefix + self.separator.join(
            f.encode(values[f.name]) for f in self.fields
        )


class ResponseParser(ABC, Generic[T]):
    """
    Abstract base class for response parsers.

    Parsers convert raw AT command responses into typed data structures.
    """

    @abstractmethod
    def parse(self, text: str) -> T:
        """
        Parse AT command response.

        Args:
            text: Raw response text from modem

        Returns:
            Parsed data structure

        Raises:
            ATParseError: If response cannot be parsed
        """
        pass

    def is_complete(self, text: str) -> bool:
        """
        Check whether a partially read response can stop accumulating.

        Only a final result code ends a response; payload lines that look
        complete are followed by ``OK`` that must be drained too.
        """
        return FINAL_RESULT_REGEX.search(text) is not None


class PatternParser(ResponseParser[str]):
    """Parser returning one capture group of a single regex."""

    def __init__(self, field: str, pattern: str, group: int = 0) -> None:
        """
        Initialize parser.

        Args:
            field: Field name reported when the pattern is absent
            pattern: Regex searched anywhere in the response
            group: Capture group returned
        """
        self.field = field
        self.regex = re.compile(pattern)
        self.group = group

    def parse(self, text: str) -> str:
        """Return the first match of the pattern."""
        match = self.regex.search(text)
        if match is None:
            raise FieldNotPresent(self.field, response=text)
        return match.group(self.group)
