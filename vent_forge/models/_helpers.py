from __future__ import annotations

from typing import Any, Dict, Optional


# ---------------------- Utilidades numéricas ----------------------

def num(x: Any, default: Optional[float] = None) -> Optional[float]:
    """Convierte a float aceptando coma decimal ("2,5"). `default` si no se puede."""
    if x is None:
        return default
    if isinstance(x, bool):
        return default
    if isinstance(x, (int, float)):
        return float(x)
    try:
        return float(str(x).strip().replace(",", "."))
    except (TypeError, ValueError):
        return default


def coalesce(params: Dict[str, Any], *keys: str) -> Any:
    """Primer valor no nulo entre varias claves (alias de la UI)."""
    for k in keys:
        if k in params and params[k] is not None:
            return params[k]
    return None
