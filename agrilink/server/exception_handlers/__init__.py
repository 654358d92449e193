"""
Exception handlers for the AgriLink server.

This package contains the handlers that turn domain, validation, database and
unexpected errors into ``ErrorResponse`` bodies, and a setup function to
register them with the FastAPI application.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
