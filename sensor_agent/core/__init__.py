"""Core - modelo de dominio y jerarquía de errores."""
