"""CLI entry point del agente DS18B20 → MQTT."""

from __future__ import annotations

import argparse
import logging
import signal
from typing import List, Optional

from common.config import get_settings

from ..core.errors import ConnectError, DeviceNotFoundError
from ..device.locator import find_device
from ..device.reader import SensorReader
from ..pipeline.change_filter import ChangeFilter
from ..transport.publisher import MQTTPublisher
from .poll_loop import PollLoop

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1


def _install_signal_handlers(loop: PollLoop) -> dict:
    def _handle(signum, frame):
        logger.info("Received signal %d, shutting down...", signum)
        loop.stop()

    previous = {}
    for sig in (signal.SIGINT, signal.SIGTERM):
        previous[sig] = signal.signal(sig, _handle)
    return previous


def _restore_signal_handlers(previous: dict) -> None:
    for sig, handler in previous.items():
        signal.signal(sig, handler)


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="DS18B20 temperature monitor (MQTT publisher)")
    p.add_argument("--env-file", default=None, help="path to a .env file")
    p.add_argument("--log-level", default=None, help="overrides LOG_LEVEL")
    p.add_argument("--once", action="store_true", help="run a single cycle and exit")
    args = p.parse_args(argv)

    settings = get_settings(args.env_file)

    level_name = (args.log_level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    logger.info("Starting DS18B20 Temperature Monitor")

    try:
        handle = find_device(settings.devices_root, settings.device_pattern)
    except DeviceNotFoundError as e:
        logger.error("Failed to initialize temperature sensor: %s", e)
        return EXIT_FATAL

    publisher = MQTTPublisher(settings)
    try:
        publisher.connect()
    except ConnectError as e:
        logger.error("Failed to initialize MQTT client: %s", e)
        return EXIT_FATAL

    loop = PollLoop(
        reader=SensorReader(handle),
        change_filter=ChangeFilter(),
        publisher=publisher,
        interval_seconds=settings.read_interval_seconds,
    )
    logger.info("Publishing to topic: %s", settings.mqtt_topic)

    previous = _install_signal_handlers(loop)
    try:
        if args.once:
            loop.run(max_cycles=1, run_immediately=True)
        else:
            loop.run()
    finally:
        _restore_signal_handlers(previous)
        publisher.disconnect(grace=settings.mqtt_disconnect_grace)
        logger.info("Final stats: %s", loop.stats)

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
