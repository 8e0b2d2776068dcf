"""API route handlers."""

from .matches import router as matches_router
