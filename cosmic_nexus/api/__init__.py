"""API routes for Cosmic Nexus"""

from cosmic_nexus.api.graph import router as graph_router
from cosmic_nexus.api.insights import router as insights_router

__all__ = ["graph_router", "insights_router"]
