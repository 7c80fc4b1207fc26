from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

import pytest

from common.config import Settings
from sensor_agent.core.domain.reading import Reading


VALID_READOUT = (
    b"72 01 4b 46 7f ff 0e 10 57 : crc=57 YES\n"
    b"72 01 4b 46 7f ff 0e 10 57 t=23125\n"
)

CAPTURED_AT = datetime(2026, 10, 17, 8, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def valid_readout() -> bytes:
    return VALID_READOUT


@pytest.fixture
def settings() -> Settings:
    """Settings de prueba (sin reintentos ni esperas largas)."""
    return Settings(
        mqtt_broker="broker.test",
        mqtt_port=1883,
        mqtt_username="agent",
        mqtt_password="secret",
        mqtt_topic="sensors/temperature",
        mqtt_client_id="ds18b20-sensor",
        mqtt_keepalive=60,
        mqtt_connect_timeout=0.05,
        mqtt_connect_attempts=1,
        mqtt_connect_backoff=0.0,
        mqtt_disconnect_grace=0.25,
        read_interval_seconds=30,
        devices_root="/sys/bus/w1/devices",
        device_pattern="28-*",
        legacy_fahrenheit=True,
        log_level="INFO",
    )


@pytest.fixture
def make_reading() -> Callable[[float], Reading]:
    def _make(value: float) -> Reading:
        return Reading(value=value, captured_at=CAPTURED_AT)
    return _make


@pytest.fixture
def w1_root(tmp_path) -> Path:
    """Namespace 1-Wire falso con un DS18B20 y el bus master."""
    root = tmp_path / "devices"
    root.mkdir()
    (root / "w1_bus_master1").mkdir()
    sensor = root / "28-00000a1b2c3d"
    sensor.mkdir()
    (sensor / "w1_slave").write_bytes(VALID_READOUT)
    return root
