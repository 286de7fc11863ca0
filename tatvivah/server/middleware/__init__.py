"""
Middleware modules for the TatVivah server.
"""

from .request_logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
