"""Publicador MQTT de lecturas de temperatura."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

import paho.mqtt.client as mqtt

from common.config import Settings

from ..core.domain.reading import Reading
from ..core.errors import ConnectError, PublishError
from ..resilience.retry import RetryConfig, RetryExecutor
from .payload import TemperaturePayload

logger = logging.getLogger(__name__)

QOS_AT_MOST_ONCE = 0
DEFAULT_DISCONNECT_GRACE = 0.25
RECONNECT_MIN_DELAY = 1
RECONNECT_MAX_DELAY = 120


def _validate_topic(topic: str) -> None:
    """Reglas de paho para topics de publicación: no vacío, sin comodines."""
    if not topic:
        raise ConnectError("invalid MQTT topic: empty")
    if "+" in topic or "#" in topic:
        raise ConnectError(f"invalid MQTT topic {topic!r}: wildcards not allowed when publishing")


@dataclass(frozen=True)
class PublishAck:
    """Confirmación de una publicación completada."""
    topic: str
    mid: int
    payload: str
    published_at: datetime


class MQTTPublisher:
    """Cliente MQTT que publica lecturas al broker.

    Responsabilidades:
    - Conexión/desconexión al broker (credenciales de la configuración)
    - Observadores de conexión/pérdida de conexión
    - Publicación QoS 0 (at-most-once), sin persistencia

    La reconexión en segundo plano la hace paho (loop_start +
    reconnect_delay_set). Un publish que coincide con una reconexión en
    curso falla con PublishError en lugar de bloquear.
    """

    def __init__(
        self,
        settings: Settings,
        retry_config: Optional[RetryConfig] = None,
        clock: Callable[[], datetime] = lambda: datetime.now().astimezone(),
    ):
        self.broker_host = settings.mqtt_broker
        self.broker_port = settings.mqtt_port
        self.username = settings.mqtt_username
        self.password = settings.mqtt_password
        self.client_id = settings.mqtt_client_id
        self.topic = settings.mqtt_topic
        self.keepalive = settings.mqtt_keepalive
        self.connect_timeout = settings.mqtt_connect_timeout
        self.legacy_fahrenheit = settings.legacy_fahrenheit

        self._retry = RetryExecutor(retry_config or RetryConfig.for_connect(settings))
        self._clock = clock

        self._client: Optional[mqtt.Client] = None
        self._connected = False
        self._connack = threading.Event()
        self._connack_error: Optional[str] = None
        self._last_info: Optional[mqtt.MQTTMessageInfo] = None

        self._published = 0
        self._failed = 0
        self._connection_losses = 0

    def connect(self) -> None:
        """Conecta al broker, reintentando con backoff.

        Raises:
            ConnectError: topic inválido o intentos agotados
        """
        _validate_topic(self.topic)
        self._client = self._build_client()
        logger.info("[MQTT] Connecting to %s:%d", self.broker_host, self.broker_port)
        try:
            self._retry.execute(self._connect_once)
        except ConnectError:
            self._client = None
            raise

    def _build_client(self) -> mqtt.Client:
        client = mqtt.Client(
            callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
            client_id=self.client_id,
            clean_session=True,
            protocol=mqtt.MQTTv311,
        )
        client.on_connect = self._on_connect
        client.on_disconnect = self._on_disconnect

        if self.username:
            client.username_pw_set(self.username, self.password)

        client.reconnect_delay_set(min_delay=RECONNECT_MIN_DELAY, max_delay=RECONNECT_MAX_DELAY)
        return client

    def _connect_once(self) -> None:
        client = self._client
        self._connack.clear()
        self._connack_error = None

        try:
            client.connect(self.broker_host, self.broker_port, keepalive=self.keepalive)
        except OSError as e:
            raise ConnectError(f"failed to connect to MQTT broker: {e}") from e

        client.loop_start()

        if not self._connack.wait(self.connect_timeout):
            client.loop_stop()
            raise ConnectError(
                f"failed to connect to MQTT broker: no CONNACK within {self.connect_timeout:.1f}s"
            )

        if self._connack_error is not None:
            client.loop_stop()
            client.disconnect()
            raise ConnectError(f"failed to connect to MQTT broker: {self._connack_error}")

    def publish(self, reading: Reading) -> PublishAck:
        """Publica una lectura.

        Espera a que el propio envío termine, sin timeout adicional.

        Raises:
            PublishError: sin sesión, rc de paho distinto de éxito o fallo al esperar
        """
        if self._client is None:
            raise PublishError("failed to publish temperature: not connected")

        published_at = self._clock()
        body = TemperaturePayload.from_reading(reading, published_at).render(
            legacy_fahrenheit=self.legacy_fahrenheit,
        )

        try:
            info = self._client.publish(self.topic, body, qos=QOS_AT_MOST_ONCE, retain=False)
        except ValueError as e:
            # topic o payload rechazados por paho antes de enviar
            self._failed += 1
            raise PublishError(f"failed to publish temperature: {e}") from e
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            self._failed += 1
            raise PublishError(f"failed to publish temperature: {mqtt.error_string(info.rc)}")

        self._last_info = info
        try:
            info.wait_for_publish()
        except (RuntimeError, ValueError) as e:
            self._failed += 1
            raise PublishError(f"failed to publish temperature: {e}") from e

        self._published += 1
        logger.info(
            "[MQTT] Published temperature: %.2f°C, fahrenheit: %.2fF",
            reading.value,
            reading.fahrenheit,
        )
        return PublishAck(topic=self.topic, mid=info.mid, payload=body, published_at=published_at)

    def disconnect(self, grace: float = DEFAULT_DISCONNECT_GRACE) -> None:
        """Cierra la sesión dando `grace` segundos al último envío en vuelo."""
        client = self._client
        if client is None:
            return
        self._client = None

        info = self._last_info
        if info is not None and not info.is_published():
            try:
                info.wait_for_publish(timeout=grace)
            except (RuntimeError, ValueError) as e:
                logger.warning("[MQTT] In-flight message not flushed: %s", e)

        client.disconnect()
        client.loop_stop()
        self._connected = False

        logger.info(
            "[MQTT] Disconnected. Stats: published=%d failed=%d connection_losses=%d",
            self._published,
            self._failed,
            self._connection_losses,
        )

    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        """Callback de conexión."""
        if reason_code.is_failure:
            self._connected = False
            self._connack_error = str(reason_code)
            logger.error("[MQTT] Connection refused: %s", reason_code)
        else:
            self._connected = True
            logger.info("[MQTT] Connected to MQTT broker")
        self._connack.set()

    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None):
        """Callback de pérdida de conexión."""
        was_connected = self._connected
        self._connected = False
        if was_connected and reason_code.is_failure:
            self._connection_losses += 1
            logger.warning("[MQTT] Connection lost: %s", reason_code)
        else:
            logger.info("[MQTT] Disconnected (%s)", reason_code)

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def stats(self) -> dict:
        return {
            "published": self._published,
            "failed": self._failed,
            "connection_losses": self._connection_losses,
            "connected": self._connected,
        }
