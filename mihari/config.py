"""
Configuration loading.

Reads the YAML configuration file into read-only dataclasses.

Example file:

.. code-block:: yaml

    name: eg25g
    path: /dev/ttyUSB3
    interval: 60
    newline_code: crlf
    parity: none
    stopbits: 1
    baudrate: 115200
    databits: 8
    read_timeout: 3
    forwarder: harvest
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .core.protocol import NEWLINE_CODES
from .core.transport import BYTESIZES, MIN_READ_TIMEOUT, PARITIES, STOPBITS, SerialSettings
from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("/etc/mihari.conf")

# Polling interval floor in seconds
MIN_INTERVAL = 5

DEFAULT_HARVEST_URL = "http://uni.soracom.io"


@dataclass(frozen=True)
class Config:
    """Application configuration, loaded once at startup."""
    serial: SerialSettings
    name: str = ""
    interval: int = 60
    newline_code: str = "crlf"
    forwarder: str = "harvest"
    harvest_url: str = DEFAULT_HARVEST_URL
    path: Optional[Path] = field(default=None, compare=False)

    @property
    def newline(self) -> bytes:
        """Command terminator bytes."""
        return NEWLINE_CODES[self.newline_code]

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Optional[Path] = None) -> "Config":
        """
        Build a Config from parsed YAML.

        Raises:
            ConfigError: If a value is missing or invalid
        """
        if not isinstance(data, dict):
            raise ConfigError(f"config must be a mapping, got {type(data).__name__}")

        port = data.get("path")
        if not port:
            raise ConfigError("config has no serial device 'path'")

        parity = str(data.get("parity", "none")).lower()
        if parity not in PARITIES:
            raise ConfigError(f"parity must be one of {sorted(PARITIES)}, got {parity!r}")

        newline_code = str(data.get("newline_code", "crlf")).lower()
        if newline_code not in NEWLINE_CODES:
            raise ConfigError(
                f"newline_code must be one of {sorted(NEWLINE_CODES)}, got {newline_code!r}"
            )

        try:
            baudrate = int(data.get("baudrate", 115200))
            databits = int(data.get("databits", 8))
            stopbits = float(data.get("stopbits", 1))
            read_timeout = float(data.get("read_timeout", MIN_READ_TIMEOUT))
            interval = int(data.get("interval", 60))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"config has a non-numeric value, {e}") from e

        if databits not in BYTESIZES:
            raise ConfigError(f"databits must be one of {sorted(BYTESIZES)}, got {databits}")
        if stopbits not in STOPBITS:
            raise ConfigError(f"stopbits must be one of {sorted(STOPBITS)}, got {stopbits}")

        if read_timeout < MIN_READ_TIMEOUT:
            logger.info(f"read_timeout is set {MIN_READ_TIMEOUT} (sec)")
            read_timeout = MIN_READ_TIMEOUT

        if interval < MIN_INTERVAL:
            logger.warning(f"interval {interval}s is below the minimum, using {MIN_INTERVAL}s")
            interval = MIN_INTERVAL

        return cls(
            serial=SerialSettings(
                port=str(port),
                baudrate=baudrate,
                parity=parity,
                databits=databits,
                stopbits=stopbits,
                read_timeout=read_timeout,
            ),
            name=str(data.get("name", "")),
            interval=interval,
            newline_code=newline_code,
            forwarder=str(data.get("forwarder", "harvest")).lower(),
            harvest_url=str(data.get("harvest_url", DEFAULT_HARVEST_URL)),
            path=path,
        )


def load_config(path: Union[str, Path]) -> Config:
    """
    Load configuration from a YAML file.

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"config file {path} could not be read, {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"config parse error, {e}") from e

    config = Config.from_dict(data or {}, path=path)
    logger.info(f"Loaded config {path}")
    return config


def find_config(path: Optional[Union[str, Path]] = None) -> Config:
    """
    Load the given config file, falling back to the default path.

    Raises:
        ConfigError: If neither file can be loaded
    """
    if path is None or not Path(path).exists():
        if path is not None:
            logger.warning(
                f"provided config file {path} does not exist, using default config {DEFAULT_CONFIG_PATH}"
            )
        path = DEFAULT_CONFIG_PATH
    return load_config(path)
