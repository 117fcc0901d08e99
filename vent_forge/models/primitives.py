# vent_forge/models/primitives.py
"""
Primitivas: contorno 2D con fillet, tronco de cono, ranura en cuña,
prisma cizallado y caja. Todas devuelven nodos del árbol de `geom`
(salvo el contorno, que es un polígono shapely).
"""
from __future__ import annotations

from typing import Tuple

import shapely.geometry as sg

from .errors import InvalidDimension
from .geom import Primitive, Solid, hull

# Espesor de las "láminas" finas que se envuelven con hull
HULL_SLAB = 0.01


# ---------------------- 2D ----------------------

def filleted_rectangle_outline(width: float, depth: float, fillet_radius: float, quad_segs: int = 32) -> sg.Polygon:
    """
    Rectángulo centrado en el origen con las 4 esquinas redondeadas.
    Se encoge cada lado `r` y se vuelve a crecer `r` con unión redonda,
    así el bbox sigue siendo exactamente (width, depth).
    """
    w, d, r = float(width), float(depth), float(fillet_radius)
    if w <= 0 or d <= 0:
        raise InvalidDimension(f"outline needs positive size, got {w} x {d}")
    if r < 0:
        raise InvalidDimension(f"fillet radius must be >= 0, got {r}")
    if r >= min(w, d) / 2.0:
        raise InvalidDimension(f"fillet radius {r} collapses a {w} x {d} outline")
    if r == 0:
        return sg.box(-w / 2.0, -d / 2.0, w / 2.0, d / 2.0)
    core = sg.box(-(w / 2.0 - r), -(d / 2.0 - r), w / 2.0 - r, d / 2.0 - r)
    return core.buffer(r, quad_segs=quad_segs, join_style="round")


# ---------------------- 3D ----------------------

def box(x: float, y: float, z: float, centered: bool = False) -> Solid:
    """Caja alineada a ejes. Sin centrar ocupa [0,x] x [0,y] x [0,z]."""
    ext = (float(x), float(y), float(z))
    if min(ext) < 0:
        raise InvalidDimension(f"box extents must be >= 0, got {ext}")
    center: Tuple[float, float, float] = (0.0, 0.0, 0.0) if centered else (ext[0] / 2.0, ext[1] / 2.0, ext[2] / 2.0)
    return Primitive("box", {"extents": ext, "center": center})


def centered_box(extents: Tuple[float, float, float], center: Tuple[float, float, float]) -> Solid:
    """Caja de `extents` con su centro en `center`."""
    ext = tuple(float(v) for v in extents)
    if min(ext) < 0:
        raise InvalidDimension(f"box extents must be >= 0, got {ext}")
    return Primitive("box", {"extents": ext, "center": tuple(float(v) for v in center)})


def truncated_cone(height: float, radius_bottom: float, radius_top: float, fragments: int, z0: float = 0.0) -> Solid:
    """Tronco de cono sobre el eje Z: r_bottom en z0, r_top en z0 + height."""
    h, rb, rt = float(height), float(radius_bottom), float(radius_top)
    if h <= 0:
        raise InvalidDimension(f"cone height must be > 0, got {h}")
    if rb < 0 or rt < 0 or (rb == 0 and rt == 0):
        raise InvalidDimension(f"invalid cone radii {rb} / {rt}")
    if int(fragments) < 3:
        raise InvalidDimension(f"fragments must be >= 3, got {fragments}")
    return Primitive(
        "frustum",
        {"height": h, "r_bottom": rb, "r_top": rt, "fragments": int(fragments), "z0": float(z0)},
    )


def cylinder(radius: float, height: float, fragments: int, z0: float = 0.0) -> Solid:
    return truncated_cone(height, radius, radius, fragments, z0=z0)


def extrude(outline: sg.Polygon, height: float, z0: float = 0.0) -> Solid:
    """Extrusión de un contorno 2D entre z0 y z0 + height."""
    if outline is None or outline.is_empty:
        raise InvalidDimension("cannot extrude an empty outline")
    if float(height) <= 0:
        raise InvalidDimension(f"extrusion height must be > 0, got {height}")
    return Primitive("extrusion", {"outline": outline, "height": float(height), "z0": float(z0)})


def wedge_slot(depth: float, width_bottom: float, width_top: float, height: float, z0: float = 0.0) -> Solid:
    """
    Ranura en cuña: hull de una lámina de ancho `width_bottom` abajo y otra de
    `width_top` arriba, ambas desde el eje hasta `depth` en +X, centradas en Y.
    Vale tanto para ranuras que se abren como para las que se cierran.
    """
    dp, wb, wt, h = float(depth), float(width_bottom), float(width_top), float(height)
    if dp <= 0 or h <= 0:
        raise InvalidDimension(f"slot needs positive depth and height, got {dp} / {h}")
    if wb < 0 or wt < 0:
        raise InvalidDimension(f"slot widths must be >= 0, got {wb} / {wt}")
    bottom = centered_box((dp, wb, HULL_SLAB), (dp / 2.0, 0.0, z0 + HULL_SLAB / 2.0))
    top = centered_box((dp, wt, HULL_SLAB), (dp / 2.0, 0.0, z0 + h - HULL_SLAB / 2.0))
    return hull([bottom, top])


def sheared_prism(width: float, span: float, height: float, shear_offset: float) -> Solid:
    """
    Prisma de perfil paralelogramo (XZ): lámina `width x span` en z=0 y la
    misma en z=height desplazada `shear_offset` en X.
    """
    w, s, h = float(width), float(span), float(height)
    if w <= 0 or s <= 0 or h <= 0:
        raise InvalidDimension(f"sheared prism needs positive sizes, got {w} / {s} / {h}")
    bottom = centered_box((w, s, HULL_SLAB), (0.0, 0.0, HULL_SLAB / 2.0))
    top = centered_box((w, s, HULL_SLAB), (float(shear_offset), 0.0, h - HULL_SLAB / 2.0))
    return hull([bottom, top])


__all__ = [
    "HULL_SLAB",
    "filleted_rectangle_outline",
    "box", "centered_box", "cylinder", "truncated_cone", "extrude",
    "wedge_slot", "sheared_prism",
]
