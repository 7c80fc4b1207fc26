"""Reintentos con backoff exponencial para la conexión al broker.

Intento n espera initial_delay * multiplier**(n-1), limitado a max_delay y
con una variación aleatoria de ±jitter_ratio.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Type, TypeVar

from common.config import Settings

from ..core.errors import ConnectError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 3
    initial_delay: float = 1.0
    max_delay: float = 10.0
    multiplier: float = 2.0
    jitter_ratio: float = 0.25
    retryable_exceptions: Tuple[Type[Exception], ...] = (Exception,)

    @classmethod
    def for_connect(cls, settings: Settings) -> "RetryConfig":
        """Política de arranque: solo ConnectError se reintenta."""
        return cls(
            max_attempts=settings.mqtt_connect_attempts,
            initial_delay=settings.mqtt_connect_backoff,
            retryable_exceptions=(ConnectError,),
        )

    def delay_for(self, attempt: int) -> float:
        delay = min(self.initial_delay * self.multiplier ** (attempt - 1), self.max_delay)
        if self.jitter_ratio:
            delay *= 1 + random.uniform(-self.jitter_ratio, self.jitter_ratio)
        return max(0.0, delay)


class RetryExecutor:
    """Ejecutor de operaciones con retry."""

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._config = config or RetryConfig()
        self._sleep = sleep
        self._total_attempts = 0
        self._total_retries = 0
        self._total_failures = 0

    @property
    def stats(self) -> dict:
        """Estadísticas del ejecutor."""
        return {
            "total_attempts": self._total_attempts,
            "total_retries": self._total_retries,
            "total_failures": self._total_failures,
        }

    def execute(
        self,
        func: Callable[..., T],
        *args,
        **kwargs,
    ) -> T:
        """Ejecuta una función con retry.

        Raises:
            La última excepción si se agotan los reintentos
        """
        for attempt in range(1, self._config.max_attempts + 1):
            self._total_attempts += 1

            try:
                return func(*args, **kwargs)

            except self._config.retryable_exceptions as e:
                if attempt == self._config.max_attempts:
                    self._total_failures += 1
                    logger.error(
                        "RETRY_EXHAUSTED func=%s attempts=%d err=%s",
                        getattr(func, "__name__", func), attempt, e,
                    )
                    raise

                self._total_retries += 1
                delay = self._config.delay_for(attempt)
                logger.warning(
                    "RETRY func=%s attempt=%d/%d delay=%.2fs err=%s",
                    getattr(func, "__name__", func), attempt,
                    self._config.max_attempts, delay, e,
                )
                self._sleep(delay)

        raise RuntimeError("Retry loop completed without result")
