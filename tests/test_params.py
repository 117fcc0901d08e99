import math

import pytest

from vent_forge.models.errors import InfeasibleWallGeometry, InvalidDimension
from vent_forge.models.params import DEFAULTS, ParameterSet


def test_defaults_from_empty_mapping():
    p = ParameterSet.from_mapping({})
    assert p == ParameterSet()
    assert p.as_dict() == DEFAULTS
    p.validate()


def test_mapping_coercion_and_ui_aliases():
    p = ParameterSet.from_mapping({"width_mm": "140", "plate_depth": "130,5", "slot_count": "8", "unknown": 1})
    assert p.plate_width == 140.0
    assert p.plate_depth == 130.5
    assert p.slot_count == 8
    assert isinstance(p.slot_count, int)


def test_mapping_rejects_non_numeric_and_fractional_counts():
    with pytest.raises(InvalidDimension):
        ParameterSet.from_mapping({"plate_width": "wide"})
    with pytest.raises(InvalidDimension):
        ParameterSet.from_mapping({"slot_count": 2.5})


def test_replace_keeps_original_untouched():
    p = ParameterSet()
    q = p.replace(slot_count=3)
    assert p.slot_count == 6
    assert q.slot_count == 3


@pytest.mark.parametrize("field", ["plate_thickness", "rim_height", "wall_thickness", "stripe_spacing", "slot_count"])
def test_negative_lengths_and_counts_rejected(field):
    with pytest.raises(InvalidDimension):
        ParameterSet().replace(**{field: -1}).validate()


def test_signed_fields_accept_negative_values():
    ParameterSet(cone_bottom_tolerance=-0.3, cone_top_tolerance=-0.2, stabilizer_overlap=-1.0).validate()


def test_fillet_must_stay_below_half_the_smaller_side():
    with pytest.raises(InvalidDimension):
        ParameterSet(plate_width=200, plate_depth=120, plate_fillet=60).validate()
    ParameterSet(plate_width=200, plate_depth=120, plate_fillet=59.9).validate()


def test_fragments_and_shear_limits():
    with pytest.raises(InvalidDimension):
        ParameterSet(fragments=2).validate()
    with pytest.raises(InvalidDimension):
        ParameterSet(stripe_shear_angle=90).validate()


def test_wall_thicker_than_radius_is_infeasible():
    with pytest.raises(InfeasibleWallGeometry):
        ParameterSet(wall_thickness=48.0).validate()


def test_tolerance_can_close_the_bore():
    p = ParameterSet(cone_bottom_diameter=10, cone_top_diameter=10, wall_thickness=4, cone_bottom_tolerance=1.5)
    with pytest.raises(InfeasibleWallGeometry):
        p.validate()


def test_inner_radii_95_96_wall_2():
    p = ParameterSet(cone_bottom_diameter=95, cone_top_diameter=96, wall_thickness=2,
                     cone_bottom_tolerance=0, cone_top_tolerance=0)
    inner = p.inner_radii()
    assert inner.bottom == pytest.approx(45.5)
    assert inner.top == pytest.approx(46.0)


def test_tolerances_shift_each_end_independently():
    p = ParameterSet(cone_bottom_tolerance=0.2, cone_top_tolerance=-0.3)
    outer = p.outer_radii()
    assert outer.bottom == pytest.approx(47.3)
    assert outer.top == pytest.approx(48.3)
    assert outer.max() == pytest.approx(48.3)


def test_shear_offset():
    assert ParameterSet(stripe_shear_angle=0).shear_offset() == 0.0
    assert ParameterSet(stripe_thickness=2, stripe_shear_angle=45).shear_offset() == pytest.approx(2.0)
    assert ParameterSet(stripe_thickness=2, stripe_shear_angle=30).shear_offset() == pytest.approx(2 * math.tan(math.pi / 6))


def test_stabilizer_spacing_four_bars():
    assert ParameterSet(stabilizer_count=4).stabilizer_spacing() == pytest.approx(23.75)
    assert ParameterSet(stabilizer_count=0).stabilizer_spacing() == 0.0


def test_cone_bore_must_leave_plate_around_it():
    with pytest.raises(InvalidDimension):
        ParameterSet(plate_width=60, plate_depth=60, plate_fillet=2).validate()
    # agujero de 45.5: con 93 mm de placa se comería el reborde de 1.2
    with pytest.raises(InvalidDimension):
        ParameterSet(plate_width=93, plate_depth=120, plate_fillet=2).validate()
    ParameterSet(plate_width=94, plate_depth=120, plate_fillet=2).validate()
    ParameterSet(plate_width=93, plate_depth=120, plate_fillet=2, rim_height=0).validate()


def test_configurator_keys_fill_absent_fields_only():
    p = ParameterSet.from_mapping({"length_mm": 90, "thickness_mm": "3", "round_mm": 4, "width": 100})
    assert (p.plate_width, p.plate_depth, p.plate_thickness, p.plate_fillet) == (100.0, 90.0, 3.0, 4.0)
    q = ParameterSet.from_mapping({"plate_depth": 110, "length_mm": 90})
    assert q.plate_depth == 110.0
