"""Payload MQTT de temperatura.

Formato publicado (compatibilidad con consumidores existentes):

    {"temperature": 23.56, "fahrenheit": 74.41F, "unit": "C", "timestamp": "2026-10-17T10:00:00+02:00"}

El sufijo F dentro del campo fahrenheit NO es JSON válido. Se conserva por
defecto (legacy_fahrenheit=True); con False se emite un número JSON.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, field_validator

from ..core.domain.reading import Reading

_TEMPLATE = (
    '{{"temperature": {temperature:.2f}, "fahrenheit": {fahrenheit:.2f}{suffix}, '
    '"unit": "{unit}", "timestamp": "{timestamp}"}}'
)


class TemperaturePayload(BaseModel):
    """Registro publicado por cada lectura que pasa el filtro."""

    temperature: float
    fahrenheit: float
    unit: Literal["C"] = "C"
    timestamp: str

    @field_validator("temperature", "fahrenheit")
    @classmethod
    def validate_finite(cls, v):
        if not math.isfinite(v):
            raise ValueError("Value is not finite")
        return v

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v):
        try:
            dt = datetime.fromisoformat(v.replace("Z", "+00:00"))
        except ValueError as e:
            raise ValueError(f"Invalid timestamp format: {e}")
        if dt.tzinfo is None:
            raise ValueError("Timestamp must carry a UTC offset (RFC3339)")
        return v

    @classmethod
    def from_reading(cls, reading: Reading, published_at: datetime) -> "TemperaturePayload":
        """Construye el payload con la hora de publicación (no la de captura)."""
        if published_at.tzinfo is None:
            published_at = published_at.astimezone()
        return cls(
            temperature=reading.value,
            fahrenheit=reading.fahrenheit,
            timestamp=published_at.isoformat(timespec="seconds"),
        )

    def render(self, legacy_fahrenheit: bool = True) -> str:
        return _TEMPLATE.format(
            temperature=self.temperature,
            fahrenheit=self.fahrenheit,
            suffix="F" if legacy_fahrenheit else "",
            unit=self.unit,
            timestamp=self.timestamp,
        )
