"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.garments import router as garments_router

__all__ = [
    "garments_router",
]
