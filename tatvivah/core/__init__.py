"""
Core utilities and configuration for TatVivah.

This package provides core functionality including logging configuration,
database setup, caching, security helpers, and other shared utilities.
"""

from tatvivah.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
