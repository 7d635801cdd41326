"""HTTP surface: FastAPI router, dependency wiring and error handlers."""

from .dependencies import build_pipeline, get_pipeline
from .errors import register_exception_handlers
from .routes import router

__all__ = [
    "build_pipeline",
    "get_pipeline",
    "register_exception_handlers",
    "router",
]
