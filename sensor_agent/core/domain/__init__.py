"""Domain layer - Modelos de dominio."""

from .reading import DeviceHandle, Reading

__all__ = ["DeviceHandle", "Reading"]
