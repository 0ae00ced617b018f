"""
Name: ASGI Entrypoint (legatepro.main)

Responsibilities:
  - Re-export the FastAPI app for ASGI servers (uvicorn legatepro.main:app)

Notes:
  - No configuration or IO here; the app is built in legatepro.api.main
"""

from legatepro.api.main import app

__all__ = ["app"]
