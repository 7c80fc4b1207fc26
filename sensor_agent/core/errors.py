"""Jerarquía de errores del agente.

Fatales en arranque:
- DeviceNotFoundError: no hay sensor que leer
- ConnectError: no hay sesión con el broker

Transitorios (el bucle registra y sigue):
- SensorReadError, ParseError, PublishError
"""

from __future__ import annotations

from enum import Enum


class SensorAgentError(Exception):
    """Base de todos los errores del agente."""


class DeviceNotFoundError(SensorAgentError):
    """Ningún dispositivo coincide con el patrón en el namespace."""


class SensorError(SensorAgentError):
    """Fallo en el ciclo lectura + parsing."""


class SensorReadError(SensorError):
    """El fichero del dispositivo no se pudo leer (desconectado, permisos)."""


class ParseErrorKind(Enum):
    MALFORMED_FORMAT = "malformed_format"
    READING_NOT_READY = "reading_not_ready"
    FIELD_NOT_FOUND = "field_not_found"
    NUMERIC_PARSE_ERROR = "numeric_parse_error"


class ParseError(SensorError):
    """Readout con formato inválido, clasificado por `kind`."""

    def __init__(self, kind: ParseErrorKind, message: str):
        super().__init__(message)
        self.kind = kind

    @property
    def retryable(self) -> bool:
        # Conversión aún no completada: condición esperada, no un error real.
        return self.kind is ParseErrorKind.READING_NOT_READY


class ConnectError(SensorAgentError):
    """No se pudo establecer la sesión MQTT."""


class PublishError(SensorAgentError):
    """La publicación MQTT no se completó."""
