"""
Engine package for the HR Lifecycle Engine.

Settings and retry handling; the personalization, email and roster modules
are imported directly from their submodules.
"""

from .retry import execute_with_retry, is_retryable_error
from .settings import Settings, load_settings

__all__ = ["Settings", "execute_with_retry", "is_retryable_error", "load_settings"]
