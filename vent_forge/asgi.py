# asgi.py
"""
Entrypoint ASGI para Uvicorn/Render:
  - uvicorn vent_forge.asgi:app
  - uvicorn vent_forge.asgi:fastapi_app
"""
from .app import app as fastapi_app

app = fastapi_app
