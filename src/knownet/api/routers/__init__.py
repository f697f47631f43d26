"""FastAPI route handlers organized by resource."""
from knownet.api.routers.statements import router as statements_router
from knownet.api.routers.query import router as query_router
from knownet.api.routers.graph import router as graph_router
from knownet.api.routers.ai import router as ai_router

__all__ = [
    "statements_router",
    "query_router",
    "graph_router",
    "ai_router",
]
