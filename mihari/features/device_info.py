"""
Device information manager.

Handles device identity queries: model info, IMEI, IMSI and ICCID.
"""

import logging

from .base import FeatureManager
from ..parsers.identity import IdentityParser
from ..profiles import IDENTITY_COMMAND

logger = logging.getLogger(__name__)


class DeviceManager(FeatureManager):
    """
    Manages device identity.

    The model query works before a profile is attached; every other query
    needs the profile's command table.
    """

    _identity_parser = IdentityParser()

    def get_model_info(self) -> tuple[str, str, str]:
        """
        Get modem model information.

        Returns:
            (manufacturer, model, firmware revision)

        Example:

        .. code-block:: python

            manufacturer, model, revision = session.device.get_model_info()
        """
        logger.info("Getting model info")
        command = self.profile.commands.identity if self.profile else IDENTITY_COMMAND
        parser = self.profile.schemas.identity if self.profile else self._identity_parser
        model_info = self._query(command, parser)
        logger.debug(f"Model info: {model_info}")
        return model_info

    def get_imei(self) -> str:
        """
        Get device IMEI (International Mobile Equipment Identity).

        Returns:
            15-digit IMEI string
        """
        logger.info("Getting IMEI")
        profile = self._require_profile()
        imei = self._query(profile.commands.imei, profile.schemas.imei)
        logger.debug(f"IMEI: {imei}")
        return imei

    def get_imsi(self) -> str:
        """
        Get SIM IMSI (International Mobile Subscriber Identity).

        Returns:
            15-digit IMSI string
        """
        logger.info("Getting IMSI")
        profile = self._require_profile()
        imsi = self._query(profile.commands.imsi, profile.schemas.imsi)
        logger.debug(f"IMSI: {imsi}")
        return imsi

    def get_iccid(self) -> str:
        """
        Get SIM ICCID.

        Returns:
            19-digit ICCID string without the "F" padding
        """
        logger.info("Getting ICCID")
        profile = self._require_profile()
        iccid = self._query(profile.commands.iccid, profile.schemas.iccid)
        logger.debug(f"ICCID: {iccid}")
        return iccid
