"""Lector del sensor: I/O del dispositivo + parsing."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from ..core.domain.reading import DeviceHandle, Reading
from ..core.errors import SensorReadError
from .parser import parse_readout

logger = logging.getLogger(__name__)


class SensorReader:
    """Realiza el ciclo lectura → parsing bajo demanda.

    Responsabilidades:
    - Leer el fichero completo del dispositivo
    - Delegar en el parser
    - Distinguir fallos de I/O (SensorReadError) de fallos de formato (ParseError)

    No reintenta: cada tick del bucle es un intento independiente.
    """

    def __init__(
        self,
        handle: DeviceHandle,
        parser: Callable[[bytes], Reading] = parse_readout,
    ):
        self._handle = handle
        self._parser = parser

    @property
    def handle(self) -> DeviceHandle:
        return self._handle

    def read(self) -> Reading:
        try:
            raw = Path(self._handle.path).read_bytes()
        except OSError as e:
            raise SensorReadError(f"error reading sensor data: {e}") from e

        logger.debug("[SENSOR] Raw readout from %s: %r", self._handle.device_id, raw)
        return self._parser(raw)
