"""Descubrimiento de sensores en el bus 1-Wire."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from ..core.domain.reading import DeviceHandle
from ..core.errors import DeviceNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_DEVICES_ROOT = "/sys/bus/w1/devices"
DEFAULT_DEVICE_PATTERN = "28-*"
SLAVE_FILE = "w1_slave"


def locate_devices(namespace_root: str, pattern: str = DEFAULT_DEVICE_PATTERN) -> List[str]:
    """Busca entradas del namespace que coincidan con el patrón glob.

    El orden es lexicográfico, así que la selección del primero es
    determinista entre arranques.

    Raises:
        DeviceNotFoundError: si no hay ninguna coincidencia
    """
    root = Path(namespace_root)
    matches = sorted(str(p) for p in root.glob(pattern))

    if not matches:
        raise DeviceNotFoundError(
            f"no DS18B20 sensors found in {namespace_root} (pattern={pattern})"
        )
    return matches


def find_device(
    namespace_root: str = DEFAULT_DEVICES_ROOT,
    pattern: str = DEFAULT_DEVICE_PATTERN,
    slave_file: str = SLAVE_FILE,
) -> DeviceHandle:
    """Devuelve el handle del primer sensor encontrado."""
    candidates = locate_devices(namespace_root, pattern)
    device_dir = Path(candidates[0])

    if len(candidates) > 1:
        logger.debug("[SENSOR] Ignoring extra candidates: %s", candidates[1:])

    logger.info("[SENSOR] Found DS18B20 sensor: %s", device_dir)
    return DeviceHandle(
        device_id=device_dir.name,
        path=str(device_dir / slave_file),
    )
