# vent_forge/models/geom.py
"""
Árbol de sólidos (CSG) inmutable.

Un `Solid` es una de estas variantes:
  - Primitive(kind, params)   -> caja, tronco de cono, extrusión 2D
  - Transform(matrix, child)  -> colocación afín 4x4
  - Boolean(op, operands)     -> union | difference | intersection
  - Hull(operands)            -> envolvente convexa

Los combinadores devuelven nodos nuevos y nunca tocan sus operandos.
La malla la genera `_booleans.evaluate` solo cuando hace falta.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, Sequence, Tuple, Union

import numpy as np
import trimesh

Matrix = Tuple[Tuple[float, ...], ...]

PRIMITIVE_KINDS = ("box", "frustum", "extrusion")
BOOLEAN_OPS = ("union", "difference", "intersection")


@dataclass(frozen=True)
class Primitive:
    kind: str
    params: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.kind not in PRIMITIVE_KINDS:
            raise ValueError(f"unknown primitive kind '{self.kind}'")


@dataclass(frozen=True)
class Transform:
    matrix: Matrix
    child: "Solid"

    def as_array(self) -> np.ndarray:
        return np.asarray(self.matrix, dtype=float)


@dataclass(frozen=True)
class Boolean:
    op: str
    operands: Tuple["Solid", ...]

    def __post_init__(self):
        if self.op not in BOOLEAN_OPS:
            raise ValueError(f"unknown boolean op '{self.op}'")
        if not self.operands:
            raise ValueError(f"{self.op} needs at least one operand")


@dataclass(frozen=True)
class Hull:
    operands: Tuple["Solid", ...]


Solid = Union[Primitive, Transform, Boolean, Hull]


# ---------------------- matrices ----------------------

def _freeze(m: np.ndarray) -> Matrix:
    return tuple(tuple(float(v) for v in row) for row in np.asarray(m, dtype=float))


def rotz(deg_: float) -> np.ndarray:
    a = math.radians(deg_)
    return trimesh.transformations.rotation_matrix(a, (0, 0, 1))


def translate_matrix(v: Sequence[float]) -> np.ndarray:
    return trimesh.transformations.translation_matrix(v)


# ---------------------- combinadores ----------------------

def union(solids: Iterable[Solid]) -> Solid:
    ops = tuple(solids)
    if len(ops) == 1:
        return ops[0]
    return Boolean("union", ops)


def difference(a: Solid, cutters: Iterable[Solid] | Solid) -> Solid:
    """`a` menos todos los cortadores; sin cortadores devuelve `a` tal cual."""
    if isinstance(cutters, (Primitive, Transform, Boolean, Hull)):
        cutters = (cutters,)
    cut = tuple(cutters)
    if not cut:
        return a
    return Boolean("difference", (a,) + cut)


def intersection(solids: Iterable[Solid]) -> Solid:
    ops = tuple(solids)
    if len(ops) == 1:
        return ops[0]
    return Boolean("intersection", ops)


def hull(solids: Iterable[Solid]) -> Solid:
    ops = tuple(solids)
    if not ops:
        raise ValueError("hull needs at least one operand")
    return Hull(ops)


def transform(solid: Solid, matrix: np.ndarray) -> Solid:
    return Transform(_freeze(matrix), solid)


def translate(solid: Solid, v: Sequence[float]) -> Solid:
    x, y, z = (float(c) for c in v)
    if x == 0.0 and y == 0.0 and z == 0.0:
        return solid
    return transform(solid, translate_matrix((x, y, z)))


def rotate_z(solid: Solid, deg_: float) -> Solid:
    return transform(solid, rotz(deg_))


# ---------------------- inspección ----------------------

def children(solid: Solid) -> Tuple[Solid, ...]:
    if isinstance(solid, Transform):
        return (solid.child,)
    if isinstance(solid, (Boolean, Hull)):
        return solid.operands
    return ()


def walk(solid: Solid) -> Iterator[Solid]:
    """Recorrido en profundidad (pre-orden) de todo el árbol."""
    yield solid
    for c in children(solid):
        yield from walk(c)


def primitives(solid: Solid, kind: str | None = None) -> Iterator[Primitive]:
    for node in walk(solid):
        if isinstance(node, Primitive) and (kind is None or node.kind == kind):
            yield node


__all__ = [
    "Primitive", "Transform", "Boolean", "Hull", "Solid",
    "rotz", "translate_matrix",
    "union", "difference", "intersection", "hull",
    "transform", "translate", "rotate_z",
    "children", "walk", "primitives",
]
