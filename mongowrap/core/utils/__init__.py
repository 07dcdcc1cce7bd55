"""
Utility functions shared across the mongowrap core package.
"""

from .async_runner import is_async_context, run_async
from .checks import ifnone

__all__ = [
    "ifnone",
    "is_async_context",
    "run_async",
]
