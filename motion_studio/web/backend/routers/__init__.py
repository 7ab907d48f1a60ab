"""API routers for the web backend."""

from .captions import router as captions_router
from .generate import router as generate_router
from .jobs import router as jobs_router
from .styles import router as styles_router

__all__ = [
    "captions_router",
    "generate_router",
    "jobs_router",
    "styles_router",
]
