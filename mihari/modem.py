"""
Main ModemSession class.

User-facing API that owns the transport and coordinates the feature managers.
"""

import logging
from typing import Optional

from .core import ATProtocol, SerialSettings, SerialTransport, Transport
from .core.protocol import DEFAULT_CHUNK_SIZE
from .features import DeviceManager, NetworkManager
from .profiles import ModemProfile, ProfileRegistry, default_registry
from .types import CellInfo, ModemIdentity, RadioAccessTechnology, ServingCellState
from .exceptions import NotAttached, TransportUnavailable

logger = logging.getLogger(__name__)


class ModemSession:
    """
    Exclusive session on one modem.

    Populates the modem identity once and reads the serving cell on demand:

    - device: Identity queries (ATI, IMEI, IMSI, ICCID)
    - network: Serving cell queries (state, RAT, cell info)

    Example usage with context manager:

    .. code-block:: python

        settings = SerialSettings(port="/dev/ttyUSB2")
        with ModemSession(settings=settings) as session:
            print(session.identity.model, session.identity.imei)
            cell_info = session.refresh_cell_info()
            if cell_info:
                print(cell_info.to_payload())
    """

    def __init__(
        self,
        settings: Optional[SerialSettings] = None,
        transport: Optional[Transport] = None,
        registry: Optional[ProfileRegistry] = None,
        newline: bytes = b"\r\n",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_wait: Optional[float] = 5.0
    ) -> None:
        """
        Initialize ModemSession.

        The transport is opened by initialize(), unless one is injected.

        Args:
            settings: Serial line parameters. Either settings or transport required.
            transport: Custom transport instance (for testing). Overrides settings if provided.
            registry: Modem profiles to pick from (default: built-in profiles)
            newline: Command terminator
            chunk_size: Bytes requested per read
            max_wait: Seconds to keep reading a response that is not complete yet

        Raises:
            ValueError: If neither settings nor transport is provided
        """
        if transport is None and settings is None:
            raise ValueError("Either 'settings' or 'transport' must be provided")

        self.settings = settings
        self.registry = registry or default_registry()
        self._newline = newline
        self._chunk_size = chunk_size
        self._max_wait = max_wait

        self.transport: Optional[Transport] = None
        self.protocol: Optional[ATProtocol] = None
        self.device: Optional[DeviceManager] = None
        self.network: Optional[NetworkManager] = None
        if transport is not None:
            self._attach(transport)

        self.identity = ModemIdentity()
        self.profile: Optional[ModemProfile] = None
        self.state: Optional[ServingCellState] = None
        self.rat: Optional[RadioAccessTechnology] = None
        self.cell_info: Optional[CellInfo] = None

        logger.info("Initialized ModemSession")

    def _attach(self, transport: Transport) -> None:
        self.transport = transport
        self.protocol = ATProtocol(
            transport,
            newline=self._newline,
            chunk_size=self._chunk_size,
            max_wait=self._max_wait
        )
        self.device = DeviceManager(self.protocol)
        self.network = NetworkManager(self.protocol)

    def open(self) -> None:
        """
        Open the serial transport with the configured mode.

        Raises:
            TransportUnavailable: If the port cannot be opened
        """
        if self.transport is not None:
            if self.transport.is_open():
                return
            if self.settings is None:
                raise TransportUnavailable(self.transport.port, "is closed")
        self._attach(SerialTransport(self.settings))

    def initialize(self) -> ModemIdentity:
        """
        Open the transport and populate the modem identity.

        Queries identity, IMEI, IMSI, ICCID and one cell info reading, then
        clears the transport buffers. The first failing step's error
        propagates unchanged.

        Returns:
            The populated ModemIdentity

        Raises:
            TransportUnavailable: If the port fails
            UnsupportedModel: If no profile knows the reported model
            IdentityNotPresent, FieldNotPresent: If an identity field is missing
            NotAttached: If the modem is searching for a network
        """
        self.open()

        manufacturer, model, revision = self.device.get_model_info()
        self.identity = ModemIdentity(
            manufacturer=manufacturer,
            model=model,
            firmware_revision=revision,
        )

        self.profile = self.registry.lookup(model)
        self.device.profile = self.profile
        self.network.profile = self.profile

        self.identity.imei = self.device.get_imei()
        self.identity.imsi = self.device.get_imsi()
        self.identity.iccid = self.device.get_iccid()
        self.refresh_cell_info()
        self.device.clear_buffers()

        logger.info(
            f"Modem initialized: {manufacturer} {model} ({revision}), "
            f"IMEI={self.identity.imei}, IMSI={self.identity.imsi}, ICCID={self.identity.iccid}"
        )
        return self.identity

    def refresh_cell_info(self) -> Optional[CellInfo]:
        """
        Read the serving cell and replace the current cell info.

        Returns:
            The new cell info, or None when the RAT has no detail decoder

        Raises:
            NotAttached: If the modem is searching (cell info is cleared)
            ModeNotResponded, RATNotResponded: If the markers are missing
            NumericConversionFailed: If a numeric field holds a non-number
            UnsupportedModel: If the session was not initialized
        """
        if self.network is None:
            raise TransportUnavailable(self.settings.port, "is not open")
        try:
            self.state, self.rat, self.cell_info = self.network.get_serving_cell()
        except NotAttached:
            self.state = ServingCellState.SEARCH
            self.rat = None
            self.cell_info = None
            raise
        return self.cell_info

    def close(self) -> None:
        """
        Close the transport.

        Safe to call while a read is blocked in another thread.
        """
        if self.transport is not None:
            self.transport.close()
            logger.info("Modem session closed")

    def __enter__(self):
        """Context manager entry; initializes the session."""
        try:
            self.initialize()
        except Exception:
            self.close()
            raise
        return self

    def __exit__(self, *exc):
        """Context manager exit; closes the transport."""
        self.close()

    def __repr__(self) -> str:
        """String representation of session."""
        model = self.identity.model or "unknown"
        return f"<ModemSession model={model} rat={self.rat.value if self.rat else None}>"
