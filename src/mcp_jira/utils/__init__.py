"""
Utility functions for the MCP Jira analysis package.
This package provides various utility functions used throughout the codebase.
"""

from .date import days_since, parse_datetime
from .env import get_env_float, get_env_int, is_env_truthy
from .ranking import rank_and_truncate

__all__ = [
    "days_since",
    "get_env_float",
    "get_env_int",
    "is_env_truthy",
    "parse_datetime",
    "rank_and_truncate",
]
