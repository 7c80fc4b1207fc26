"""Parser del readout crudo del DS18B20.

Formato esperado (w1_slave):

    72 01 4b 46 7f ff 0e 10 57 : crc=57 YES
    72 01 4b 46 7f ff 0e 10 57 t=23125

- Línea 1 termina con el marcador de validez (YES = CRC correcto)
- Línea 2 contiene t=<miligrados>

Función pura: sin I/O ni estado.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

from ..core.domain.reading import Reading
from ..core.errors import ParseError, ParseErrorKind

VALIDITY_MARKER = "YES"
TEMPERATURE_FIELD = "t="

# Solo dígitos ASCII en base 10, signo opcional.
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def parse_readout(raw: bytes, now: Optional[datetime] = None) -> Reading:
    """Convierte el readout crudo en una lectura validada.

    Args:
        raw: Contenido completo del fichero del dispositivo
        now: Timestamp de captura (por defecto, ahora en UTC)

    Returns:
        Reading con la temperatura en °C

    Raises:
        ParseError: con kind MALFORMED_FORMAT, READING_NOT_READY,
            FIELD_NOT_FOUND o NUMERIC_PARSE_ERROR
    """
    text = raw.decode("utf-8", errors="replace")

    lines = text.split("\n")
    if len(lines) < 2:
        raise ParseError(ParseErrorKind.MALFORMED_FORMAT, "invalid sensor data format")

    if VALIDITY_MARKER not in lines[0]:
        raise ParseError(ParseErrorKind.READING_NOT_READY, "sensor reading not ready")

    idx = lines[1].find(TEMPERATURE_FIELD)
    if idx == -1:
        raise ParseError(ParseErrorKind.FIELD_NOT_FOUND, "temperature value not found")

    value_str = lines[1][idx + len(TEMPERATURE_FIELD):].strip()
    if not _INTEGER_RE.fullmatch(value_str):
        raise ParseError(
            ParseErrorKind.NUMERIC_PARSE_ERROR,
            f"error parsing temperature: {value_str!r}",
        )

    # Miligrados → °C
    millidegrees = int(value_str)
    return Reading(
        value=millidegrees / 1000.0,
        captured_at=now or datetime.now(timezone.utc),
    )
