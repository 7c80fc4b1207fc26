"""Agente de telemetría DS18B20 → MQTT.

Estructura:
- core/        → Modelo de dominio y errores
- device/      → Descubrimiento, lectura y parsing del sensor 1-Wire
- pipeline/    → Filtro de cambios
- transport/   → Publicación MQTT
- resilience/  → Reintentos con backoff
- runner/      → Bucle de sondeo y CLI
"""

__version__ = "1.0.0"
