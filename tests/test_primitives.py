import math

import pytest

from vent_forge.models.errors import InvalidDimension
from vent_forge.models.geom import Hull, Primitive, primitives
from vent_forge.models.primitives import (
    HULL_SLAB,
    box,
    cylinder,
    extrude,
    filleted_rectangle_outline,
    sheared_prism,
    truncated_cone,
    wedge_slot,
)


@pytest.mark.parametrize("w,d,r", [(120, 120, 5), (80, 40, 19.9), (60, 30, 0.5), (60, 30, 0)])
def test_outline_bounding_box_equals_requested_size(w, d, r):
    poly = filleted_rectangle_outline(w, d, r)
    minx, miny, maxx, maxy = poly.bounds
    assert (minx, miny, maxx, maxy) == pytest.approx((-w / 2, -d / 2, w / 2, d / 2), abs=1e-9)
    assert poly.is_valid and not poly.is_empty


def test_outline_rounds_corners():
    poly = filleted_rectangle_outline(100, 50, 10)
    expected = 100 * 50 - (4 - math.pi) * 10 ** 2
    assert poly.area == pytest.approx(expected, rel=1e-3)
    assert poly.area < 100 * 50


def test_zero_fillet_is_sharp_rectangle():
    assert filleted_rectangle_outline(30, 20, 0).area == pytest.approx(600)


@pytest.mark.parametrize("r", [10, 12, -1])
def test_outline_rejects_collapsing_or_negative_fillet(r):
    with pytest.raises(InvalidDimension):
        filleted_rectangle_outline(40, 20, r)


def test_box_centered_and_corner_anchored():
    a = box(2, 4, 6)
    b = box(2, 4, 6, centered=True)
    assert a.params["center"] == (1.0, 2.0, 3.0)
    assert b.params["center"] == (0.0, 0.0, 0.0)
    assert a.params["extents"] == b.params["extents"] == (2.0, 4.0, 6.0)


def test_truncated_cone_parameters_and_validation():
    c = truncated_cone(20, 47.5, 48, 64)
    assert isinstance(c, Primitive) and c.kind == "frustum"
    assert c.params == {"height": 20.0, "r_bottom": 47.5, "r_top": 48.0, "fragments": 64, "z0": 0.0}
    with pytest.raises(InvalidDimension):
        truncated_cone(0, 1, 1, 64)
    with pytest.raises(InvalidDimension):
        truncated_cone(1, 1, 1, 2)
    assert cylinder(3, 2, 16, z0=-1).params["r_top"] == 3.0


def test_extrude_rejects_empty_outline():
    poly = filleted_rectangle_outline(10, 10, 1)
    assert extrude(poly, 2, z0=-2).params["z0"] == -2.0
    with pytest.raises(InvalidDimension):
        extrude(poly.buffer(-20), 2)


@pytest.mark.parametrize("wb,wt", [(1, 5), (5, 1)])
def test_wedge_slot_is_hull_of_two_slabs(wb, wt):
    w = wedge_slot(50, wb, wt, 20)
    assert isinstance(w, Hull)
    bottom, top = w.operands
    assert bottom.params["extents"] == pytest.approx((50, wb, HULL_SLAB))
    assert top.params["extents"] == pytest.approx((50, wt, HULL_SLAB))
    # ambos desde el eje hacia +X
    assert bottom.params["center"][0] == pytest.approx(25)
    assert bottom.params["center"][2] - HULL_SLAB / 2 == pytest.approx(0)
    assert top.params["center"][2] + HULL_SLAB / 2 == pytest.approx(20)


def test_sheared_prism_offsets_top_slab_only():
    s = sheared_prism(1.2, 190, 2, 1.5)
    bottom, top = s.operands
    assert bottom.params["center"][0] == 0.0
    assert top.params["center"][0] == pytest.approx(1.5)
    assert top.params["center"][2] + HULL_SLAB / 2 == pytest.approx(2)
    assert len(list(primitives(s, "box"))) == 2


def test_sheared_prism_rejects_degenerate_sizes():
    with pytest.raises(InvalidDimension):
        sheared_prism(0, 10, 2, 0)
