"""Modelo de dominio para lecturas del sensor."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Reading:
    """Lectura de temperatura - modelo canónico del pipeline.

    Contrato único que fluye por todo el agente:
    Sensor → Parser → ChangeFilter → MQTT

    Solo el parser construye lecturas; son inmutables.
    """
    value: float
    captured_at: datetime

    @property
    def fahrenheit(self) -> float:
        return self.value * 9 / 5 + 32

    @property
    def truncated(self) -> int:
        """Valor entero truncado hacia cero (20.9 → 20, -0.5 → 0)."""
        return math.trunc(self.value)


@dataclass(frozen=True)
class DeviceHandle:
    """Sensor descubierto en el bus 1-Wire.

    device_id: nombre del directorio (p.ej. 28-00000a1b2c3d)
    path: fichero de lectura cruda (w1_slave)
    """
    device_id: str
    path: str
