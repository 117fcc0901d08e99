# vent_forge/models/vent_cover.py
"""
Rejilla de ventilación imprimible:

  - placa rectangular con esquinas redondeadas y reborde opcional
  - cono hueco de montaje con ranuras radiales en cuña
  - rejilla de tiras cizalladas recortada a la huella del cono
  - tiras estabilizadoras perpendiculares

Convenio común: eje central x=0, y=0; la cara superior de la placa y la
base del cono están en z=0. La placa ocupa [-espesor, 0]; todo lo demás
crece hacia +Z. Ningún ensamblador recoloca a otro.
"""
from __future__ import annotations

import logging
import time
import warnings
from typing import Any, Dict, List, Optional, Tuple

import trimesh

from .. import config
from . import _booleans
from .distribution import distribute_radially, distribute_symmetric, linear_positions, tile_linearly
from .errors import BOOLEAN_EPSILON, ConstructionError, DegenerateDistribution
from .geom import Solid, difference, intersection, translate, union
from .params import DEFAULTS, TYPES, ParameterSet
from .primitives import (
    centered_box,
    cylinder,
    extrude,
    filleted_rectangle_outline,
    sheared_prism,
    truncated_cone,
    wedge_slot,
)

logger = logging.getLogger(__name__)

NAME = "vent_cover"
SLUGS = ["vent-cover", "ventilation-cover", "rejilla_ventilacion", "rejilla-ventilacion"]

COMPONENTS = ("plate_rim", "hollow_cone", "stripe_grid", "stabilizers")


# ---------------------- placa + reborde ----------------------

def plate_outline(p: ParameterSet):
    return filleted_rectangle_outline(p.plate_width, p.plate_depth, p.plate_fillet)


def plate_with_rim(p: ParameterSet) -> Solid:
    outline = plate_outline(p)
    plate = extrude(outline, p.plate_thickness, z0=-p.plate_thickness)

    body = plate
    if p.rim_height > 0 and p.rim_width > 0:
        # pared hueca: contorno menos el mismo contorno encogido rim_width
        ring = outline.difference(outline.buffer(-p.rim_width, join_style="round"))
        body = union([plate, extrude(ring, p.rim_height, z0=0.0)])

    # agujero del cono: radio interior inferior, pasante con margen por ambos lados
    hole = cylinder(
        p.inner_radii().bottom,
        p.plate_thickness + 2.0 * BOOLEAN_EPSILON,
        p.fragments,
        z0=-p.plate_thickness - BOOLEAN_EPSILON,
    )
    return difference(body, hole)


# ---------------------- cono hueco ----------------------

def _extended(bottom: float, top: float, height: float, margin: float) -> Tuple[float, float]:
    """Prolonga linealmente (bottom, top) `margin` por cada extremo."""
    slope = (top - bottom) / height
    return max(0.0, bottom - slope * margin), max(0.0, top + slope * margin)


def cone_slot(p: ParameterSet) -> Solid:
    """
    Una ranura en ángulo 0. Profundidad max(radios exteriores) + 1 para
    atravesar la pared sea cual sea el sentido del cono.
    """
    outer = p.outer_radii()
    h, e = p.cone_height, BOOLEAN_EPSILON
    wb, wt = _extended(p.slot_width_bottom, p.slot_width_top, h, e)
    return wedge_slot(outer.max() + 1.0, wb, wt, h + 2.0 * e, z0=-e)


def hollow_cone(p: ParameterSet) -> Solid:
    outer, inner = p.outer_radii(), p.inner_radii()
    h, e = p.cone_height, BOOLEAN_EPSILON

    body = truncated_cone(h, outer.bottom, outer.top, p.fragments)
    # el hueco sobresale `e` por cada lado; los radios se extrapolan para que
    # en z=0 y z=h valgan exactamente inner.bottom / inner.top
    rb, rt = _extended(inner.bottom, inner.top, h, e)
    bore = truncated_cone(h + 2.0 * e, rb, rt, p.fragments, z0=-e)
    shell = difference(body, bore)

    if p.slot_count <= 0:
        warnings.warn("slot_count is 0: cone built without slots", DegenerateDistribution, stacklevel=2)
        return shell
    slots = list(distribute_radially(cone_slot(p), p.slot_count))
    return difference(shell, union(slots))


# ---------------------- rejilla ----------------------

def stripe(p: ParameterSet, x: float) -> Solid:
    """Tira cizallada con su base centrada en X=x. El cizallado no depende de x."""
    span = 2.0 * (2.0 * p.outer_radii().bottom)
    prism = sheared_prism(p.stripe_width, span, p.stripe_thickness, p.shear_offset())
    return translate(prism, (x, 0.0, 0.0))


def footprint(p: ParameterSet, z0: float, height: float) -> Solid:
    """Cilindro de la huella del cono (radio exterior inferior)."""
    return cylinder(p.outer_radii().bottom, height, p.fragments, z0=z0)


def _reaches_footprint(p: ParameterSet, x: float) -> bool:
    """La tira en X=x pisa la huella: su sombra en X corta (-R, R)."""
    r, half, s = p.outer_radii().bottom, p.stripe_width / 2.0, p.shear_offset()
    return min(x, x + s) - half < r and max(x, x + s) + half > -r


def stripe_grid(p: ParameterSet) -> Optional[Solid]:
    diameter = 2.0 * p.outer_radii().bottom
    positions = [pl.offset for pl in linear_positions(diameter, p.stripe_step())]
    if not any(_reaches_footprint(p, x) for x in positions):
        warnings.warn(
            f"stripe step {p.stripe_step()} leaves no stripe inside the footprint: grid omitted",
            DegenerateDistribution,
            stacklevel=2,
        )
        return None
    stripes = list(tile_linearly(lambda x: stripe(p, x), diameter, p.stripe_step()))
    return intersection([union(stripes), footprint(p, 0.0, p.stripe_thickness)])


# ---------------------- estabilizadores ----------------------

def stabilizer_z(p: ParameterSet) -> float:
    """Base de los estabilizadores: se hunden `overlap` en la capa de la rejilla."""
    return p.stripe_thickness - p.stabilizer_overlap


def stabilizers(p: ParameterSet) -> Optional[Solid]:
    if p.stabilizer_count <= 0:
        warnings.warn("stabilizer_count is 0: stabilizers omitted", DegenerateDistribution, stacklevel=2)
        return None

    e = BOOLEAN_EPSILON
    length = 2.0 * p.outer_radii().bottom + 2.0 * e
    z0 = stabilizer_z(p)

    # tiras a lo largo de X (perpendiculares a la rejilla), repartidas en Y
    def bar(y: float) -> Solid:
        return centered_box(
            (length, p.stabilizer_width, p.stabilizer_height),
            (0.0, y, z0 + p.stabilizer_height / 2.0),
        )

    bars = list(distribute_symmetric(bar, p.stabilizer_count, p.stabilizer_spacing()))
    z_lo = min(0.0, z0)
    z_hi = max(p.stripe_thickness, z0 + p.stabilizer_height)
    clip = footprint(p, z_lo - e, (z_hi - z_lo) + 2.0 * e)
    return intersection([union(bars), clip])


# ---------------------- composición ----------------------

def components(p: ParameterSet) -> List[Tuple[str, Solid]]:
    """Componentes con nombre, en orden de composición (los omitidos no aparecen)."""
    built = [
        ("plate_rim", plate_with_rim(p)),
        ("hollow_cone", hollow_cone(p)),
        ("stripe_grid", stripe_grid(p)),
        ("stabilizers", stabilizers(p)),
    ]
    return [(name, solid) for name, solid in built if solid is not None]


def compose(p: ParameterSet) -> Solid:
    """Valida y devuelve el árbol completo (unión de los componentes)."""
    p.validate()
    return union(solid for _, solid in components(p))


def _parameter_set(params: Dict[str, Any] | ParameterSet | None) -> ParameterSet:
    if isinstance(params, ParameterSet):
        return params
    params = dict(params or {})
    if config.FRAGMENTS_OVERRIDE and params.get("fragments") is None:
        params["fragments"] = config.FRAGMENTS_OVERRIDE
    return ParameterSet.from_mapping(params)


def make_model(params: Dict[str, Any] | ParameterSet | None = None) -> trimesh.Trimesh:
    """
    Builder principal: parámetros -> malla lista para exportar.
    Cada componente se evalúa aparte para que un fallo del kernel diga cuál fue.
    """
    p = _parameter_set(params).validate()
    t0 = time.perf_counter()
    logger.info("vent_cover: building (fragments=%d, slots=%d, stabilizers=%d)",
                p.fragments, p.slot_count, p.stabilizer_count)

    meshes: List[trimesh.Trimesh] = []
    for name, solid in components(p):
        try:
            mesh = _booleans.evaluate(solid)
        except ConstructionError as e:
            raise ConstructionError(str(e), component=name) from e
        logger.debug("vent_cover: %s -> %d faces", name, len(mesh.faces))
        meshes.append(mesh)

    try:
        out = _booleans.union(meshes)
    except Exception as e:
        raise ConstructionError(f"final union failed: {e}", component="scene") from e
    if not out.is_watertight:
        raise ConstructionError("final union is not watertight", component="scene")

    logger.info("vent_cover: done in %.2fs (%d faces)", time.perf_counter() - t0, len(out.faces))
    return out


def make(params: Dict[str, Any]) -> trimesh.Trimesh:
    return make_model(params)


BUILD = {"make": make}

__all__ = [
    "NAME", "SLUGS", "TYPES", "DEFAULTS", "COMPONENTS",
    "plate_outline", "plate_with_rim", "cone_slot", "hollow_cone",
    "stripe", "footprint", "stripe_grid", "stabilizer_z", "stabilizers",
    "components", "compose", "make_model", "make", "BUILD",
]
