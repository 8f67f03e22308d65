"""API routes."""

from .previews import router as previews_router, redirect_router

__all__ = ["previews_router", "redirect_router"]
