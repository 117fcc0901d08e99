# vent_forge/models/params.py
"""
Parámetros de la rejilla de ventilación.

`ParameterSet` es inmutable: se construye una vez por petición desde un
mapping plano (`from_mapping`) y se valida antes de componer ningún sólido.
Todas las longitudes en mm, ángulos en grados.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields, replace as _dc_replace
from typing import Any, Dict, Mapping, Tuple

from ._helpers import coalesce, num
from .errors import InfeasibleWallGeometry, InvalidDimension

TYPES: Dict[str, str] = {
    "plate_width": "float",            # ancho placa (X)
    "plate_depth": "float",            # fondo placa (Y)
    "plate_thickness": "float",        # espesor placa
    "plate_fillet": "float",           # radio de esquina
    "rim_height": "float",             # altura del reborde (0 = sin reborde)
    "rim_width": "float",              # ancho del reborde
    "cone_bottom_diameter": "float",   # diámetro exterior nominal abajo
    "cone_top_diameter": "float",      # diámetro exterior nominal arriba
    "cone_bottom_tolerance": "float",  # tolerancia de radio abajo (con signo)
    "cone_top_tolerance": "float",     # tolerancia de radio arriba (con signo)
    "wall_thickness": "float",         # pared del cono
    "cone_height": "float",
    "slot_count": "int",               # ranuras radiales
    "slot_width_bottom": "float",
    "slot_width_top": "float",
    "stripe_thickness": "float",       # capa de la rejilla
    "stripe_width": "float",
    "stripe_spacing": "float",
    "stripe_shear_angle": "float",     # grados
    "stabilizer_count": "int",
    "stabilizer_width": "float",
    "stabilizer_height": "float",
    "stabilizer_overlap": "float",     # negativo = hueco
    "fragments": "int",                # segmentos por círculo
}

DEFAULTS: Dict[str, Any] = {
    "plate_width": 120.0,
    "plate_depth": 120.0,
    "plate_thickness": 2.0,
    "plate_fillet": 5.0,
    "rim_height": 3.0,
    "rim_width": 1.2,
    "cone_bottom_diameter": 95.0,
    "cone_top_diameter": 96.0,
    "cone_bottom_tolerance": 0.0,
    "cone_top_tolerance": 0.0,
    "wall_thickness": 2.0,
    "cone_height": 20.0,
    "slot_count": 6,
    "slot_width_bottom": 1.0,
    "slot_width_top": 5.0,
    "stripe_thickness": 2.0,
    "stripe_width": 1.2,
    "stripe_spacing": 4.0,
    "stripe_shear_angle": 30.0,
    "stabilizer_count": 4,
    "stabilizer_width": 1.2,
    "stabilizer_height": 2.0,
    "stabilizer_overlap": 0.4,
    "fragments": 128,
}

# Alias que manda el configurador genérico (length_mm, width_mm, ...)
UI_ALIASES: Dict[str, Tuple[str, ...]] = {
    "plate_width": ("width_mm", "width"),
    "plate_depth": ("depth_mm", "length_mm", "depth"),
    "plate_thickness": ("thickness_mm", "thickness"),
    "plate_fillet": ("fillet_mm", "round_mm", "fillet"),
}

# Campos con signo: no se exige >= 0
SIGNED = {"cone_bottom_tolerance", "cone_top_tolerance", "stabilizer_overlap", "stripe_shear_angle"}


@dataclass(frozen=True)
class RadiusPair:
    bottom: float
    top: float

    def max(self) -> float:
        return max(self.bottom, self.top)


@dataclass(frozen=True)
class ParameterSet:
    plate_width: float = DEFAULTS["plate_width"]
    plate_depth: float = DEFAULTS["plate_depth"]
    plate_thickness: float = DEFAULTS["plate_thickness"]
    plate_fillet: float = DEFAULTS["plate_fillet"]
    rim_height: float = DEFAULTS["rim_height"]
    rim_width: float = DEFAULTS["rim_width"]
    cone_bottom_diameter: float = DEFAULTS["cone_bottom_diameter"]
    cone_top_diameter: float = DEFAULTS["cone_top_diameter"]
    cone_bottom_tolerance: float = DEFAULTS["cone_bottom_tolerance"]
    cone_top_tolerance: float = DEFAULTS["cone_top_tolerance"]
    wall_thickness: float = DEFAULTS["wall_thickness"]
    cone_height: float = DEFAULTS["cone_height"]
    slot_count: int = DEFAULTS["slot_count"]
    slot_width_bottom: float = DEFAULTS["slot_width_bottom"]
    slot_width_top: float = DEFAULTS["slot_width_top"]
    stripe_thickness: float = DEFAULTS["stripe_thickness"]
    stripe_width: float = DEFAULTS["stripe_width"]
    stripe_spacing: float = DEFAULTS["stripe_spacing"]
    stripe_shear_angle: float = DEFAULTS["stripe_shear_angle"]
    stabilizer_count: int = DEFAULTS["stabilizer_count"]
    stabilizer_width: float = DEFAULTS["stabilizer_width"]
    stabilizer_height: float = DEFAULTS["stabilizer_height"]
    stabilizer_overlap: float = DEFAULTS["stabilizer_overlap"]
    fragments: int = DEFAULTS["fragments"]

    # ---------------------- construcción ----------------------

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any] | None) -> "ParameterSet":
        """
        Construye el set desde un mapping plano. Claves ausentes -> DEFAULTS,
        claves desconocidas se ignoran. No valida geometría (ver `validate`).
        """
        params = dict(params or {})
        values: Dict[str, Any] = {}
        for f in fields(cls):
            raw = coalesce(params, f.name, *UI_ALIASES.get(f.name, ()))
            if raw is None:
                continue
            v = num(raw)
            if v is None or not math.isfinite(v):
                raise InvalidDimension(f"{f.name}: expected a number, got {raw!r}")
            if TYPES[f.name] == "int":
                if not float(v).is_integer():
                    raise InvalidDimension(f"{f.name}: expected an integer count, got {raw!r}")
                values[f.name] = int(v)
            else:
                values[f.name] = float(v)
        return cls(**values)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def replace(self, **changes: Any) -> "ParameterSet":
        return _dc_replace(self, **changes)

    # ---------------------- derivados ----------------------

    def outer_radii(self) -> RadiusPair:
        """Radio exterior = diámetro nominal / 2 - tolerancia (en cada extremo)."""
        return RadiusPair(
            bottom=self.cone_bottom_diameter / 2.0 - self.cone_bottom_tolerance,
            top=self.cone_top_diameter / 2.0 - self.cone_top_tolerance,
        )

    def inner_radii(self) -> RadiusPair:
        outer = self.outer_radii()
        return RadiusPair(
            bottom=outer.bottom - self.wall_thickness,
            top=outer.top - self.wall_thickness,
        )

    def shear_offset(self) -> float:
        return self.stripe_thickness * math.tan(math.radians(self.stripe_shear_angle))

    def stripe_step(self) -> float:
        return self.stripe_width + self.stripe_spacing

    def stabilizer_spacing(self) -> float:
        """(2 * radio exterior inferior) / n; 0 si no hay estabilizadores."""
        if self.stabilizer_count <= 0:
            return 0.0
        return 2.0 * self.outer_radii().bottom / self.stabilizer_count

    # ---------------------- validación ----------------------

    def validate(self) -> "ParameterSet":
        """Lanza InvalidDimension / InfeasibleWallGeometry; devuelve self si todo cuadra."""
        for f in fields(self):
            if f.name in SIGNED:
                continue
            if getattr(self, f.name) < 0:
                raise InvalidDimension(f"{f.name} must be >= 0, got {getattr(self, f.name)}")

        for name in ("plate_width", "plate_depth", "plate_thickness", "cone_height", "stripe_thickness"):
            if getattr(self, name) <= 0:
                raise InvalidDimension(f"{name} must be > 0")

        if self.fragments < 3:
            raise InvalidDimension(f"fragments must be >= 3, got {self.fragments}")

        half_min = min(self.plate_width, self.plate_depth) / 2.0
        if self.plate_fillet >= half_min:
            raise InvalidDimension(
                f"plate_fillet {self.plate_fillet} must be < half the smaller plate side ({half_min})"
            )
        if self.rim_height > 0 and self.rim_width >= half_min:
            raise InvalidDimension(f"rim_width {self.rim_width} must be < {half_min}")

        if abs(self.stripe_shear_angle) >= 90.0:
            raise InvalidDimension("stripe_shear_angle must be within (-90, 90) degrees")
        if self.stripe_width <= 0:
            raise InvalidDimension("stripe_width must be > 0")
        if self.stripe_step() <= 0:
            raise InvalidDimension("stripe_width + stripe_spacing must be > 0")

        if self.slot_count > 0 and max(self.slot_width_bottom, self.slot_width_top) <= 0:
            raise InvalidDimension("slot widths must not both be 0")
        if self.stabilizer_count > 0 and (self.stabilizer_width <= 0 or self.stabilizer_height <= 0):
            raise InvalidDimension("stabilizer_width and stabilizer_height must be > 0")

        for name in ("cone_bottom_diameter", "cone_top_diameter"):
            if getattr(self, name) <= 2.0 * self.wall_thickness:
                raise InfeasibleWallGeometry(
                    f"{name} {getattr(self, name)} must exceed 2 x wall_thickness ({2.0 * self.wall_thickness})"
                )
        inner = self.inner_radii()
        if inner.bottom <= 0 or inner.top <= 0:
            raise InfeasibleWallGeometry(
                f"wall_thickness {self.wall_thickness} leaves no bore "
                f"(inner radii {inner.bottom:.3f} / {inner.top:.3f})"
            )

        # el agujero del cono tiene que dejar placa (y reborde) alrededor
        limit = half_min - (self.rim_width if self.rim_height > 0 else 0.0)
        if inner.bottom >= limit:
            raise InvalidDimension(
                f"cone bore radius {inner.bottom:.3f} must be < {limit:.3f} "
                f"to leave plate material around the cone foot"
            )
        return self


__all__ = ["TYPES", "DEFAULTS", "UI_ALIASES", "RadiusPair", "ParameterSet"]
