"""
Feature managers for modem functionality.

Provides high-level managers for different modem capabilities:
- DeviceManager: Manufacturer, model, firmware, IMEI, IMSI, ICCID
- NetworkManager: Serving cell state, RAT and cell info
"""

from .base import FeatureManager
from .device_info import DeviceManager
from .network import NetworkManager

__all__ = [
    "FeatureManager",
    "DeviceManager",
    "NetworkManager",
]
