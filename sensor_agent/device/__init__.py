"""Dispositivo 1-Wire: descubrimiento, lectura y parsing del readout."""

from .locator import find_device, locate_devices
from .parser import parse_readout
from .reader import SensorReader

__all__ = ["find_device", "locate_devices", "parse_readout", "SensorReader"]
