from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Dict, Literal

import trimesh
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field

from . import config
from .models import REGISTRY, get_builder, get_module, resolve_slug
from .models.errors import ConstructionError, VentCoverError
from .supabase_client import CONTENT_TYPES, upload_and_get_url

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
# los DegenerateDistribution (warnings.warn) acaban en el log
logging.captureWarnings(True)
logger = logging.getLogger(__name__)

# -------------------------- App --------------------------

app = FastAPI(title="FORGE — Vent Cover Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------------------------- Schemas --------------------------

class GenerateBody(BaseModel):
    slug: str = "vent_cover"
    params: Dict[str, Any] = Field(default_factory=dict)
    fmt: Literal["stl", "glb"] = "stl"

# -------------------------- Helpers --------------------------

def _slug_for_storage(s: str) -> str:
    return (s or "").strip().lower().replace("_", "-")


def hash_key(*parts: str) -> str:
    h = hashlib.sha256()
    for p in parts:
        h.update(p.encode())
    return h.hexdigest()[:16]


def export_bytes(mesh: trimesh.Trimesh, fmt: str) -> bytes:
    """STL binario o GLB (preview a color)."""
    if fmt == "glb":
        from trimesh.visual import ColorVisuals

        base = mesh.copy()
        base.visual = ColorVisuals(base, face_colors=[210, 210, 210, 255])  # gris claro
        scene = trimesh.Scene()
        scene.add_geometry(base, node_name="base")
        return scene.export(file_type="glb")
    return mesh.export(file_type="stl")

# -------------------------- Endpoints --------------------------

@app.get("/health")
def health():
    return {
        "ok": True,
        "service": "forge-vent",
        "loaded_models": sorted(REGISTRY.keys()),
        "storage": config.storage_enabled(),
    }


@app.get("/models/{slug}")
def model_info(slug: str):
    mod = get_module(slug)
    if mod is None:
        raise HTTPException(status_code=404, detail=f"Model '{slug}' not found")
    return {
        "slug": resolve_slug(slug),
        "types": getattr(mod, "TYPES", {}),
        "defaults": getattr(mod, "DEFAULTS", {}),
    }


@app.post("/generate")
def generate(body: GenerateBody):
    builder_slug = resolve_slug(body.slug)
    builder = get_builder(body.slug)
    if builder is None:
        raise HTTPException(status_code=404, detail=f"Model '{body.slug}' not found")

    params = dict(body.params or {})
    try:
        mesh = builder(params)
    except VentCoverError as e:
        raise HTTPException(status_code=422, detail=f"Invalid parameters: {e}")
    except ConstructionError as e:
        logger.error("construction failed in %s: %s", e.component, e)
        raise HTTPException(status_code=500, detail=f"Model build error: {e}")

    data = export_bytes(mesh, body.fmt)
    storage_slug = _slug_for_storage(builder_slug)
    key = hash_key(builder_slug, json.dumps(params, sort_keys=True, default=str))
    filename = f"{key}.{body.fmt}"

    if not config.storage_enabled():
        return Response(
            content=data,
            media_type=CONTENT_TYPES[body.fmt],
            headers={"Content-Disposition": f'attachment; filename="{storage_slug}-{filename}"'},
        )

    object_path = f"{storage_slug}/{filename}"
    try:
        out = upload_and_get_url(data, object_path, content_type=CONTENT_TYPES[body.fmt])
    except Exception as e:
        logger.exception("upload failed for %s", object_path)
        raise HTTPException(status_code=500, detail=f"Upload error: {e}")
    return {"ok": True, "slug": builder_slug, **out}
