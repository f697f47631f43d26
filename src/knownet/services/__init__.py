"""Services layered over the graph: queries, persistence, export and theory generation."""
from knownet.services.query_service import QueryService
from knownet.services.storage import JSONGraphStore, StorageError

__all__ = [
    "QueryService",
    "JSONGraphStore",
    "StorageError",
]
