"""
HTTP API

FastAPI routers for the pill identifier.
"""

from .identify_router import router, domain_exception_handler, status_for_exception

__all__ = [
    "router",
    "domain_exception_handler",
    "status_for_exception",
]
