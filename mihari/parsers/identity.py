"""
Identity response parsers.

Parses ATI, AT+CGSN, AT+CIMI and AT+QCCID responses.
"""

import logging
import re

from .base import PatternParser, ResponseParser
from ..exceptions import IdentityNotPresent

logger = logging.getLogger(__name__)


class IdentityParser(ResponseParser[tuple[str, str, str]]):
    """Parser for ATI (manufacturer, model, revision) response."""

    regex = re.compile(
        r"(?P<manufacturer>.*)\r\n(?P<model>.*)\r\nRevision: (?P<firmware_revision>.*)\r\n"
    )

    def parse(self, text: str) -> tuple[str, str, str]:
        """
        Parse ATI response.

        Expected format:
            Quectel
            EG25
            Revision: EG25GGBR07A08M2G
        """
        match = self.regex.search(text)
        if match is None:
            raise IdentityNotPresent(command="ATI", response=text)

        return (
            match.group("manufacturer").strip(),
            match.group("model").strip(),
            match.group("firmware_revision").strip(),
        )


class DigitRunParser(PatternParser):
    """
    Parser for a bare run of digits anywhere in the response.

    IMEI (AT+CGSN) and IMSI (AT+CIMI) are both 15 digits, so the same
    pattern accepts either; which one was decoded is decided only by the
    command that produced the response.
    """

    def __init__(self, field: str, digits: int = 15) -> None:
        super().__init__(field, rf"[0-9]{{{digits}}}")


class ICCIDParser(PatternParser):
    """
    Parser for AT+QCCID response.

    Expected format: "+QCCID: 8981100022152143219F"
    The trailing "F" pads the 19 digit ICCID to an even nibble count.
    """

    def __init__(self) -> None:
        super().__init__("ICCID", r"([0-9]{19})F", group=1)
