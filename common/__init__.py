"""Utilidades compartidas (configuración por entorno)."""
