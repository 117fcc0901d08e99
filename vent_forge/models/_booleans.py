# vent_forge/models/_booleans.py
"""
Adaptador al kernel geométrico: convierte un árbol de `geom` en un
`trimesh.Trimesh`. Los booleanos van por manifold3d (engine="manifold"),
el hull por qhull (`trimesh.convex.convex_hull`).
"""
from __future__ import annotations

import logging
from typing import List

import numpy as np
import trimesh

from .errors import ConstructionError
from .geom import Boolean, Hull, Primitive, Solid, Transform

logger = logging.getLogger(__name__)

ENGINE = "manifold"


# ---------------------- comprobaciones ----------------------

def _valid(mesh: trimesh.Trimesh) -> bool:
    return isinstance(mesh, trimesh.Trimesh) and mesh.vertices.shape[0] > 0 and len(mesh.faces) > 0


def _check(mesh: trimesh.Trimesh, what: str) -> trimesh.Trimesh:
    if not _valid(mesh):
        raise ConstructionError(f"{what} produced an empty mesh")
    if not mesh.is_watertight:
        raise ConstructionError(f"{what} produced a non-manifold mesh")
    return mesh


# ---------------------- primitivas ----------------------

def _ring(radius: float, z: float, fragments: int) -> np.ndarray:
    if radius <= 0:
        return np.array([[0.0, 0.0, z]])
    a = np.linspace(0.0, 2.0 * np.pi, fragments, endpoint=False)
    return np.column_stack([radius * np.cos(a), radius * np.sin(a), np.full(fragments, z)])


def _primitive(p: Primitive) -> trimesh.Trimesh:
    prm = p.params
    if p.kind == "box":
        m = trimesh.creation.box(extents=np.asarray(prm["extents"], dtype=float))
        m.apply_translation(prm["center"])
        return m
    if p.kind == "frustum":
        z0 = prm["z0"]
        pts = np.vstack([
            _ring(prm["r_bottom"], z0, prm["fragments"]),
            _ring(prm["r_top"], z0 + prm["height"], prm["fragments"]),
        ])
        return trimesh.convex.convex_hull(pts)
    if p.kind == "extrusion":
        m = trimesh.creation.extrude_polygon(prm["outline"], height=prm["height"])
        m.apply_translation((0.0, 0.0, prm["z0"]))
        return m
    raise ConstructionError(f"unknown primitive '{p.kind}'")


# ---------------------- booleanos ----------------------

def union(meshes: List[trimesh.Trimesh]) -> trimesh.Trimesh:
    if len(meshes) == 1:
        return meshes[0]
    return trimesh.boolean.union(meshes, engine=ENGINE)


def difference(a: trimesh.Trimesh, cutters: List[trimesh.Trimesh]) -> trimesh.Trimesh:
    if not cutters:
        return a
    return trimesh.boolean.difference([a] + list(cutters), engine=ENGINE)


def intersection(meshes: List[trimesh.Trimesh]) -> trimesh.Trimesh:
    if len(meshes) == 1:
        return meshes[0]
    return trimesh.boolean.intersection(meshes, engine=ENGINE)


def convex_hull(meshes: List[trimesh.Trimesh]) -> trimesh.Trimesh:
    pts = np.vstack([np.asarray(m.vertices) for m in meshes if len(m.vertices)])
    return trimesh.convex.convex_hull(pts)


# ---------------------- evaluación ----------------------

def evaluate(solid: Solid) -> trimesh.Trimesh:
    """Evalúa el árbol de abajo arriba. Cualquier fallo del kernel -> ConstructionError."""
    if isinstance(solid, Primitive):
        what = f"primitive '{solid.kind}'"
        try:
            mesh = _primitive(solid)
        except ConstructionError:
            raise
        except Exception as e:
            raise ConstructionError(f"{what} failed: {e}") from e
        return _check(mesh, what)

    if isinstance(solid, Transform):
        mesh = evaluate(solid.child).copy()
        mesh.apply_transform(solid.as_array())
        return mesh

    if isinstance(solid, Hull):
        operands = [evaluate(s) for s in solid.operands]
        try:
            mesh = convex_hull(operands)
        except Exception as e:
            raise ConstructionError(f"hull failed: {e}") from e
        return _check(mesh, "hull")

    if isinstance(solid, Boolean):
        operands = [evaluate(s) for s in solid.operands]
        logger.debug("boolean %s over %d operands", solid.op, len(operands))
        try:
            if solid.op == "union":
                mesh = union(operands)
            elif solid.op == "difference":
                mesh = difference(operands[0], operands[1:])
            else:
                mesh = intersection(operands)
        except Exception as e:
            raise ConstructionError(f"{solid.op} failed: {e}") from e
        return _check(mesh, solid.op)

    raise ConstructionError(f"not a solid: {type(solid).__name__}")


__all__ = ["ENGINE", "evaluate", "union", "difference", "intersection", "convex_hull"]
