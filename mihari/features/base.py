"""
Shared plumbing for feature managers.
"""

import logging
from typing import TYPE_CHECKING, Optional, TypeVar

from ..parsers.base import ResponseParser
from ..exceptions import ATParseError, UnsupportedModel

if TYPE_CHECKING:
    from ..core import ATProtocol
    from ..profiles import ModemProfile

logger = logging.getLogger(__name__)

T = TypeVar('T')


class FeatureManager:
    """
    Base for managers that issue AT commands and decode the responses.

    The profile is attached once the modem model is known.
    """

    def __init__(self, protocol: "ATProtocol", profile: Optional["ModemProfile"] = None) -> None:
        """
        Initialize manager.

        Args:
            protocol: ATProtocol instance for AT command execution
            profile: Modem profile supplying commands and schemas
        """
        self.protocol = protocol
        self.profile = profile

    def _require_profile(self, model: str = "") -> "ModemProfile":
        if self.profile is None:
            raise UnsupportedModel(model or "unknown")
        return self.profile

    def _read(self, command: str, parser: ResponseParser) -> str:
        """
        Run command, reading until parser considers the response complete.

        Transport buffers are cleared right after the raw read, so nothing
        left over reaches the next command.
        """
        raw = self.protocol.execute(command, until=parser.is_complete)
        self.clear_buffers()
        return raw.decode("utf-8", errors="replace")

    def _decode(self, command: str, parser: ResponseParser[T], text: str) -> T:
        """Parse text, tagging parse errors with the command that produced it."""
        try:
            return parser.parse(text)
        except ATParseError as e:
            if e.command is None:
                e.command = command
            raise

    def _query(self, command: str, parser: ResponseParser[T]) -> T:
        """Run command and parse its response."""
        return self._decode(command, parser, self._read(command, parser))

    def clear_buffers(self) -> None:
        """Discard anything left in the transport's input and output buffers."""
        transport = self.protocol.transport
        transport.reset_input_buffer()
        transport.reset_output_buffer()
