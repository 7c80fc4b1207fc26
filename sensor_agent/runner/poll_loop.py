"""Bucle de sondeo: lectura → filtro → publicación.

Cadencia por ciclo (no solapada): el intervalo se cuenta desde el final del
ciclo anterior, no sobre una rejilla fija de reloj.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Optional

from ..core.errors import ParseError, PublishError, SensorReadError
from ..device.reader import SensorReader
from ..pipeline.change_filter import ChangeFilter
from ..transport.publisher import MQTTPublisher

logger = logging.getLogger(__name__)


class CycleOutcome(Enum):
    """Resultado de un ciclo del bucle."""
    PUBLISHED = "published"
    SUPPRESSED = "suppressed"
    NOT_READY = "not_ready"
    READ_FAILED = "read_failed"
    PARSE_FAILED = "parse_failed"
    PUBLISH_FAILED = "publish_failed"


class PollLoop:
    """Orquesta lector, filtro y publicador a intervalo fijo.

    Ningún fallo dentro de un ciclo detiene el proceso: se registra y el
    bucle vuelve a Idle hasta el siguiente tick.
    """

    def __init__(
        self,
        reader: SensorReader,
        change_filter: ChangeFilter,
        publisher: MQTTPublisher,
        interval_seconds: float,
        stop_event: Optional[threading.Event] = None,
    ):
        self._reader = reader
        self._filter = change_filter
        self._publisher = publisher
        self._interval = interval_seconds
        self._stop = stop_event or threading.Event()

        self._stats = {outcome: 0 for outcome in CycleOutcome}
        self._cycles = 0

    def run_cycle(self) -> CycleOutcome:
        """Ejecuta un ciclo completo y devuelve su resultado."""
        outcome = self._cycle()
        self._cycles += 1
        self._stats[outcome] += 1
        return outcome

    def _cycle(self) -> CycleOutcome:
        try:
            reading = self._reader.read()
        except ParseError as e:
            if e.retryable:
                logger.debug("[POLL] Sensor conversion not complete, retrying next cycle")
                return CycleOutcome.NOT_READY
            logger.warning("[POLL] Error reading temperature: %s (kind=%s)", e, e.kind.value)
            return CycleOutcome.PARSE_FAILED
        except SensorReadError as e:
            logger.warning("[POLL] Error reading temperature: %s", e)
            return CycleOutcome.READ_FAILED

        logger.info(
            "[POLL] Temperature read: %.2f°C, fahrenheit: %.2fF",
            reading.value,
            reading.fahrenheit,
        )

        if not self._filter.should_publish(reading):
            logger.debug(
                "[POLL] Unchanged (%d == last published), skipping publish",
                reading.truncated,
            )
            return CycleOutcome.SUPPRESSED

        try:
            self._publisher.publish(reading)
        except PublishError as e:
            logger.error("[POLL] Error publishing temperature: %s", e)
            return CycleOutcome.PUBLISH_FAILED

        self._filter.confirm_published(reading)
        return CycleOutcome.PUBLISHED

    def run(self, max_cycles: Optional[int] = None, run_immediately: bool = False) -> None:
        """Bucle Idle/Cycle hasta stop() o hasta completar max_cycles."""
        logger.info("[POLL] Reading temperature every %ss", self._interval)

        done = 0
        if run_immediately and not self._stop.is_set():
            self.run_cycle()
            done += 1

        while max_cycles is None or done < max_cycles:
            # Idle: el wait vuelve en cuanto se pide parada
            if self._stop.wait(self._interval):
                break
            self.run_cycle()
            done += 1

        logger.info("[POLL] Stopped after %d cycles", self._cycles)

    def stop(self) -> None:
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    @property
    def stats(self) -> dict:
        return {
            "cycles": self._cycles,
            "published": self._stats[CycleOutcome.PUBLISHED],
            "suppressed": self._stats[CycleOutcome.SUPPRESSED],
            "not_ready": self._stats[CycleOutcome.NOT_READY],
            "read_errors": self._stats[CycleOutcome.READ_FAILED],
            "parse_errors": self._stats[CycleOutcome.PARSE_FAILED],
            "publish_errors": self._stats[CycleOutcome.PUBLISH_FAILED],
        }
