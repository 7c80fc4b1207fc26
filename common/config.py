from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def _default_env_file() -> str:
    # .env junto al directorio de trabajo (instalación como servicio).
    return str(Path.cwd() / ".env")


def _env_str(key: str, default: str) -> str:
    value = os.getenv(key)
    if value:
        return value
    return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value:
        try:
            return int(value)
        except ValueError:
            return default
    return default


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value:
        try:
            return float(value)
        except ValueError:
            return default
    return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if not value:
        return default
    return value.strip().lower() in ("true", "1", "yes", "on")


@dataclass(frozen=True)
class Settings:
    mqtt_broker: str
    mqtt_port: int
    mqtt_username: str
    mqtt_password: str
    mqtt_topic: str
    mqtt_client_id: str
    mqtt_keepalive: int
    mqtt_connect_timeout: float
    mqtt_connect_attempts: int
    mqtt_connect_backoff: float
    mqtt_disconnect_grace: float

    read_interval_seconds: int

    devices_root: str
    device_pattern: str

    legacy_fahrenheit: bool
    log_level: str


def get_settings(env_file: Optional[str] = None) -> Settings:
    # Load env file (if present) but still allow overriding via real environment variables.
    env_file = env_file or os.getenv("SENSOR_ENV_FILE", _default_env_file())
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    return Settings(
        mqtt_broker=_env_str("MQTT_BROKER", "localhost"),
        mqtt_port=_env_int("MQTT_PORT", 1883),
        mqtt_username=_env_str("MQTT_USERNAME", ""),
        mqtt_password=_env_str("MQTT_PASSWORD", ""),
        mqtt_topic=_env_str("MQTT_TOPIC", "sensors/temperature"),
        mqtt_client_id=_env_str("MQTT_CLIENT_ID", "ds18b20-sensor"),
        mqtt_keepalive=_env_int("MQTT_KEEPALIVE", 60),
        mqtt_connect_timeout=_env_float("MQTT_CONNECT_TIMEOUT", 5.0),
        mqtt_connect_attempts=max(1, _env_int("MQTT_CONNECT_ATTEMPTS", 3)),
        mqtt_connect_backoff=max(0.0, _env_float("MQTT_CONNECT_BACKOFF", 1.0)),
        mqtt_disconnect_grace=_env_float("MQTT_DISCONNECT_GRACE", 0.25),
        # Intervalo <= 0 haría girar el bucle sin pausa.
        read_interval_seconds=max(1, _env_int("READ_INTERVAL_SECONDS", 30)),
        # Bus 1-Wire del kernel; familia 28 = DS18B20.
        devices_root=_env_str("W1_DEVICES_ROOT", "/sys/bus/w1/devices"),
        device_pattern=_env_str("W1_DEVICE_PATTERN", "28-*"),
        legacy_fahrenheit=_env_bool("PAYLOAD_LEGACY_FAHRENHEIT", True),
        log_level=_env_str("LOG_LEVEL", "INFO").upper(),
    )
