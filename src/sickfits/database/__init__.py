"""
Database module for the Sick Fits backend
"""

from .connection import get_async_session, init_database, reset_database, store_errors

__all__ = ["get_async_session", "init_database", "reset_database", "store_errors"]
