"""Recursos empaquetados (solo lectura)."""
