# vent_forge/supabase_client.py
from __future__ import annotations

import io
import logging
from typing import Dict, Optional

from supabase import Client, create_client

from . import config

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    "stl": "model/stl",
    "glb": "model/gltf-binary",
}

_client: Optional[Client] = None


def _get() -> Client:
    global _client
    if _client is None:
        if not config.storage_enabled():
            raise RuntimeError("Supabase ENV vars missing (SUPABASE_URL / SUPABASE_SERVICE_KEY)")
        _client = create_client(config.SUPABASE_URL, config.SUPABASE_SERVICE_KEY)
    return _client


def upload_and_get_url(
    data: bytes | bytearray | io.BytesIO,
    object_path: str,
    *,
    content_type: str = CONTENT_TYPES["stl"],
    expires_in: int = 3600,
) -> Dict[str, Optional[str]]:
    """
    Sube el fichero al bucket y devuelve { path, signed_url }.
    'object_path' es relativo al bucket, p.ej. 'vent-cover/3f2a9c1d.stl'.
    Si el objeto ya existe se borra antes (equivale a upsert).
    """
    path = (object_path or "").lstrip("/")
    if not path or "/" not in path:
        raise ValueError("object_path must be '<slug>/<file>'")

    store = _get().storage.from_(config.SUPABASE_BUCKET)
    existing = store.list(path.rsplit("/", 1)[0])
    if any(item.get("name") == path.rsplit("/", 1)[1] for item in existing or []):
        store.remove([path])

    payload = data.getvalue() if hasattr(data, "getvalue") else bytes(data)
    store.upload(path, payload, {"content-type": content_type})
    logger.info("uploaded %s (%d bytes) to bucket %s", path, len(payload), config.SUPABASE_BUCKET)

    signed = store.create_signed_url(path, expires_in)
    signed_url = None
    if isinstance(signed, dict):
        signed_url = signed.get("signedURL") or signed.get("signed_url")
    return {"path": path, "signed_url": signed_url}
