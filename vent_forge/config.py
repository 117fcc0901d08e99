# vent_forge/config.py
# Configuración por variables de entorno (Render / contenedor)
from __future__ import annotations

import logging
import os
from typing import List, Optional


def _split_origins(s: Optional[str]) -> List[str]:
    if not s:
        return []
    return [x.strip() for x in s.split(",") if x.strip()]


def _int_env(name: str) -> Optional[int]:
    raw = (os.getenv(name, "") or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logging.getLogger(__name__).warning("%s=%r is not an integer, ignored", name, raw)
        return None


CORS_ALLOW = os.getenv("CORS_ALLOW_ORIGINS", "")
ORIGINS = _split_origins(CORS_ALLOW) or ["*"]

SUPABASE_URL = (os.getenv("SUPABASE_URL", "") or "").rstrip("/")
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY", "") or os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
SUPABASE_BUCKET = os.getenv("SUPABASE_BUCKET", "forge-stl")

LOG_LEVEL = (os.getenv("FORGE_LOG_LEVEL", "INFO") or "INFO").upper()

# Si se define, sustituye el número de segmentos por defecto de los círculos
FRAGMENTS_OVERRIDE = _int_env("FORGE_FRAGMENTS")


def storage_enabled() -> bool:
    return bool(SUPABASE_URL and SUPABASE_SERVICE_KEY)
