"""API routers"""
from .listings import router as listings_router

__all__ = ["listings_router"]
