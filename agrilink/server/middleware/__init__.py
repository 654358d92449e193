"""
Middleware modules for the AgriLink server.

This package contains custom middleware for request timing and Logfire
request logging.
"""

from .logfire_middleware import LogfireMiddleware

__all__ = ["LogfireMiddleware"]
