"""Transporte MQTT hacia el broker."""

from .payload import TemperaturePayload
from .publisher import MQTTPublisher, PublishAck

__all__ = ["MQTTPublisher", "PublishAck", "TemperaturePayload"]
