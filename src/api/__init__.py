"""HTTP API routers."""

from src.api.routes import router

__all__ = ["router"]
