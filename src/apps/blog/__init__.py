"""Blog app."""

from .routers.post_router import router as post_router
from .routers.post_pages import router as post_pages_router
