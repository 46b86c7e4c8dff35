
from . import documents, merge, sessions

routers = [
    sessions.router,
    documents.router,
    merge.router,
]

__all__ = [
    "routers",
]
