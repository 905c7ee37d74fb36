"""
app/api/routers package marker.
"""

from app.api.routers.indicators import router as indicators_router
from app.api.routers.upload import router as upload_router

__all__ = [
    "indicators_router",
    "upload_router",
]
