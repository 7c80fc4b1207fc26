"""Tests de descubrimiento y lectura del dispositivo 1-Wire."""

import pytest

from sensor_agent.core.errors import (
    DeviceNotFoundError,
    ParseError,
    ParseErrorKind,
    SensorReadError,
)
from sensor_agent.core.domain.reading import DeviceHandle
from sensor_agent.device.locator import find_device, locate_devices
from sensor_agent.device.reader import SensorReader


# =============================================================================
# LOCATOR
# =============================================================================

class TestLocateDevices:

    def test_returns_only_matching_entries(self, w1_root):
        matches = locate_devices(str(w1_root), "28-*")
        assert matches == [str(w1_root / "28-00000a1b2c3d")]

    def test_multiple_matches_sorted(self, w1_root):
        (w1_root / "28-000000000001").mkdir()
        (w1_root / "28-ffffffffffff").mkdir()
        matches = locate_devices(str(w1_root), "28-*")
        assert matches == sorted(matches)
        assert len(matches) == 3
        assert matches[0].endswith("28-000000000001")

    def test_no_match_raises(self, tmp_path):
        with pytest.raises(DeviceNotFoundError):
            locate_devices(str(tmp_path), "28-*")

    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(DeviceNotFoundError):
            locate_devices(str(tmp_path / "nope"), "28-*")


class TestFindDevice:

    def test_handle_points_to_slave_file(self, w1_root):
        handle = find_device(str(w1_root), "28-*")
        assert handle.device_id == "28-00000a1b2c3d"
        assert handle.path == str(w1_root / "28-00000a1b2c3d" / "w1_slave")

    def test_first_in_scan_order_wins(self, w1_root):
        (w1_root / "28-000000000001").mkdir()
        handle = find_device(str(w1_root), "28-*")
        assert handle.device_id == "28-000000000001"


# =============================================================================
# READER
# =============================================================================

class TestSensorReader:

    def test_reads_and_parses(self, w1_root):
        reader = SensorReader(find_device(str(w1_root), "28-*"))
        assert reader.read().value == 23.125

    def test_unreadable_device_raises_read_error(self, tmp_path):
        reader = SensorReader(DeviceHandle(device_id="28-gone", path=str(tmp_path / "w1_slave")))
        with pytest.raises(SensorReadError) as exc:
            reader.read()
        assert isinstance(exc.value.__cause__, OSError)

    def test_not_ready_is_surfaced(self, tmp_path):
        slave = tmp_path / "w1_slave"
        slave.write_bytes(b"72 01 4b 46 7f ff 0e 10 57 : crc=00 NO\n72 01 4b 46 7f ff 0e 10 57 t=23125\n")
        reader = SensorReader(DeviceHandle(device_id="28-x", path=str(slave)))
        with pytest.raises(ParseError) as exc:
            reader.read()
        assert exc.value.kind is ParseErrorKind.READING_NOT_READY

    def test_each_read_hits_the_device(self, tmp_path):
        """Sin caché: cada llamada vuelve a leer el fichero."""
        slave = tmp_path / "w1_slave"
        slave.write_bytes(b"YES\nt=20000\n")
        reader = SensorReader(DeviceHandle(device_id="28-x", path=str(slave)))
        assert reader.read().value == 20.0
        slave.write_bytes(b"YES\nt=21500\n")
        assert reader.read().value == 21.5
