"""
Autodiscovery de builders.

Para cada módulo `models/<nombre>.py` (que no sea helper) se registra un
builder con estas reglas, en orden:

1) Si define `BUILD: dict`, se usa `BUILD["make"]` o `BUILD["build"]`.
2) Si expone `make` / `make_model` / `build`, se usa.
3) Alias snake <-> kebab automáticos, más `NAME` y `SLUGS` del módulo.
"""
from __future__ import annotations

import importlib
import pkgutil
from typing import Callable, Dict, Iterable, Optional

REGISTRY: Dict[str, Callable] = {}
ALIASES: Dict[str, str] = {}

# módulos del motor, no son modelos
_NOT_MODELS = {"geom", "params", "primitives", "distribution", "errors"}


def _register(name_snake: str, fn: Callable) -> None:
    key = name_snake.lower()
    REGISTRY[key] = fn
    ALIASES.setdefault(key, key)
    ALIASES.setdefault(key.replace("_", "-"), key)


def _add_alias(raw_slug: str, target_snake: str) -> None:
    """Añade alias sin pisar entradas existentes."""
    raw = raw_slug.strip().lower()
    snake = target_snake.strip().lower()
    ALIASES.setdefault(raw, snake)
    ALIASES.setdefault(raw.replace("-", "_"), snake)
    ALIASES.setdefault(raw.replace("_", "-"), snake)


def _pick_builder(mod) -> Optional[Callable]:
    build_dict = getattr(mod, "BUILD", None)
    if isinstance(build_dict, dict):
        cand = build_dict.get("make") or build_dict.get("build")
        if callable(cand):
            return cand
    for attr in ("make", "make_model", "build"):
        f = getattr(mod, attr, None)
        if callable(f):
            return f
    return None


for _finder, _name, _ispkg in pkgutil.iter_modules(__path__):
    if _ispkg or _name.startswith("_") or _name in _NOT_MODELS:
        continue
    mod = importlib.import_module(f"{__name__}.{_name}")

    fn = _pick_builder(mod)
    if fn is None:
        continue
    _register(_name, fn)

    name_alias = getattr(mod, "NAME", None)
    if isinstance(name_alias, str) and name_alias.strip():
        _add_alias(name_alias, _name)
    slugs: Iterable[str] = getattr(mod, "SLUGS", []) or []
    for s in slugs:
        if isinstance(s, str) and s.strip():
            _add_alias(s, _name)


def resolve_slug(slug_or_name: str) -> Optional[str]:
    """Slug (snake, kebab o alias) -> nombre registrado, o None."""
    if not slug_or_name:
        return None
    raw = slug_or_name.strip().lower()
    snake = ALIASES.get(raw, ALIASES.get(raw.replace("-", "_"), raw.replace("-", "_")))
    return snake if snake in REGISTRY else None


def get_builder(slug_or_name: str) -> Optional[Callable]:
    name = resolve_slug(slug_or_name)
    return REGISTRY.get(name) if name else None


def get_module(slug_or_name: str):
    """Módulo del modelo (para TYPES / DEFAULTS)."""
    name = resolve_slug(slug_or_name)
    return importlib.import_module(f"{__name__}.{name}") if name else None


__all__ = ["REGISTRY", "ALIASES", "resolve_slug", "get_builder", "get_module"]
