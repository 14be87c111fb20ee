"""
Network manager.

Handles serving cell queries: state, radio access technology and cell info.
"""

import logging
from typing import Optional

from .base import FeatureManager
from ..types import CellInfo, RadioAccessTechnology, ServingCellState

logger = logging.getLogger(__name__)


class NetworkManager(FeatureManager):
    """
    Manages serving cell monitoring.

    Each call is an independent observation; nothing is carried between polls.
    """

    def get_serving_cell(
        self
    ) -> tuple[ServingCellState, RadioAccessTechnology, Optional[CellInfo]]:
        """
        Query and decode the serving cell.

        Transport buffers are cleared right after the raw read, before decoding.

        Returns:
            (state, rat, cell info); cell info is None when the RAT has no
            detail decoder

        Raises:
            NotAttached: If the modem is searching for a network
            ModeNotResponded: If the servingcell marker is missing
            RATNotResponded: If the RAT is missing
            NumericConversionFailed: If a numeric field holds a non-number

        Example:

        .. code-block:: python

            state, rat, cell_info = session.network.get_serving_cell()
            if cell_info:
                print(cell_info.to_payload())
        """
        logger.info("Getting serving cell info")
        profile = self._require_profile()
        command = profile.commands.cell_info
        mode_parser = profile.schemas.serving_cell

        text = self._read(command, mode_parser)

        state, rat = self._decode(command, mode_parser, text)

        detail_parser = profile.schemas.detail_parser(rat)
        if detail_parser is None:
            logger.info(f"No cell info decoder for {rat.value}, skipping details")
            return state, rat, None

        cell_info = self._decode(command, detail_parser, text)
        logger.debug(f"Cell info: {cell_info}")
        return state, rat, cell_info
