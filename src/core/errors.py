"""Errores del add-on.

Por qué una jerarquía propia:
- La CLI captura `AddonError` y lo presenta sin traceback.
- Cualquier otra excepción es un bug y debe propagarse.
"""

from __future__ import annotations


class AddonError(Exception):
    """Base de todos los errores esperables del add-on."""


class PreconditionError(AddonError):
    """No hay proyecto activo, falta un descriptor o el XML no es legible."""


class ValidationError(AddonError):
    """Argumento requerido ausente o recurso de configuración inválido."""


def require(condition: bool, message: str) -> None:
    if not condition:
        raise PreconditionError(message)


def not_none(value: object, message: str) -> None:
    if value is None:
        raise ValidationError(message)
