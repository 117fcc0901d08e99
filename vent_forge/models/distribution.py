# vent_forge/models/distribution.py
"""
Reparto de copias: radial (alrededor de Z), lineal (a lo largo de X) y
simétrico respecto a 0. Todo son generadores: cada llamada devuelve una
secuencia nueva, finita y sin estado compartido.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator

from .errors import InvalidDimension
from .geom import Solid, rotate_z

# Tolerancia para el último paso del teselado lineal (evita perder el tope por redondeo)
_LINEAR_EPS = 1e-9


@dataclass(frozen=True)
class Placement:
    index: int
    angle: float = 0.0    # grados, reparto radial
    offset: float = 0.0   # mm, reparto lineal/simétrico


# ---------------------- radial ----------------------

def radial_placements(count: int) -> Iterator[Placement]:
    """Ángulos i * 360/count, i en [0, count). count=0 no produce nada."""
    n = int(count)
    if n < 0:
        raise InvalidDimension(f"count must be >= 0, got {n}")
    if n == 0:
        return
    step = 360.0 / n
    for i in range(n):
        yield Placement(index=i, angle=i * step)


def distribute_radially(primitive: Solid, count: int) -> Iterator[Solid]:
    for p in radial_placements(count):
        yield rotate_z(primitive, p.angle) if p.angle else primitive


# ---------------------- lineal ----------------------

def linear_positions(axis_extent: float, step: float) -> Iterator[Placement]:
    """-axis_extent, -axis_extent + step, ... mientras la posición <= +axis_extent."""
    ext, st = float(axis_extent), float(step)
    if st <= 0:
        raise InvalidDimension(f"tiling step must be > 0, got {st}")
    if ext < 0:
        raise InvalidDimension(f"axis extent must be >= 0, got {ext}")
    i = 0
    while True:
        # se calcula desde el índice para no acumular error de suma
        x = -ext + i * st
        if x > ext + _LINEAR_EPS:
            return
        yield Placement(index=i, offset=x)
        i += 1


def tile_linearly(factory: Callable[[float], Solid], axis_extent: float, step: float) -> Iterator[Solid]:
    for p in linear_positions(axis_extent, step):
        yield factory(p.offset)


# ---------------------- simétrico ----------------------

def symmetric_offsets(count: int, spacing: float) -> Iterator[Placement]:
    """(i - (count-1)/2) * spacing: impar centra uno en 0, par queda a caballo."""
    n = int(count)
    if n < 0:
        raise InvalidDimension(f"count must be >= 0, got {n}")
    mid = (n - 1) / 2.0
    for i in range(n):
        yield Placement(index=i, offset=(i - mid) * float(spacing))


def distribute_symmetric(factory: Callable[[float], Solid], count: int, spacing: float) -> Iterator[Solid]:
    for p in symmetric_offsets(count, spacing):
        yield factory(p.offset)


__all__ = [
    "Placement",
    "radial_placements", "distribute_radially",
    "linear_positions", "tile_linearly",
    "symmetric_offsets", "distribute_symmetric",
]
