# vent_forge/models/errors.py
"""
Errores del generador de rejillas de ventilación.

Los errores de parámetros se lanzan antes de construir ningún booleano.
Los fallos del kernel (malla vacía, no estanca) se elevan como
`ConstructionError` indicando qué componente los produjo.
"""
from __future__ import annotations

from typing import Optional

# Margen de sobre-extensión para volúmenes que se restan o recortan.
# Evita caras coplanarias en el kernel; depende del epsilon propio de manifold3d.
BOOLEAN_EPSILON = 0.1


class VentCoverError(ValueError):
    """Base de los errores de parámetros."""


class InvalidDimension(VentCoverError):
    pass


class InfeasibleWallGeometry(VentCoverError):
    pass


class DegenerateDistribution(UserWarning):
    """Recuento 0 en una distribución: el componente se omite (solo aviso)."""


class ConstructionError(RuntimeError):
    def __init__(self, message: str, component: Optional[str] = None):
        self.component = component
        if component:
            message = f"[{component}] {message}"
        super().__init__(message)


__all__ = [
    "BOOLEAN_EPSILON",
    "VentCoverError",
    "InvalidDimension",
    "InfeasibleWallGeometry",
    "DegenerateDistribution",
    "ConstructionError",
]
