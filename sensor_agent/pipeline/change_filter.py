"""Filtro de cambios por valor entero truncado."""

from __future__ import annotations

from typing import Optional

from ..core.domain.reading import Reading


class ChangeFilter:
    """Decide si una lectura merece publicarse.

    CLAVE DE COMPARACIÓN: parte entera truncada hacia cero (no redondeo).
    - 20.9 → 20 y 20.1 → 20 se consideran iguales
    - Sin valor previo publicado siempre se publica

    El estado solo avanza con confirm_published(), que el llamador invoca
    tras una publicación exitosa. Un fallo de publicación no suprime el valor.
    """

    def __init__(self):
        self._last_published: Optional[int] = None

    @property
    def last_published(self) -> Optional[int]:
        return self._last_published

    def should_publish(self, reading: Reading) -> bool:
        if self._last_published is None:
            return True
        return reading.truncated != self._last_published

    def confirm_published(self, reading: Reading) -> None:
        self._last_published = reading.truncated

    def reset(self) -> None:
        self._last_published = None
