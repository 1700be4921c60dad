"""
Data collectors for fetching users from external sources.

This module provides the async client for the Reqres API.
"""

from reqres_users.collectors.base import Collector
from reqres_users.collectors.reqres import ReqresClient

__all__ = [
    "Collector",
    "ReqresClient",
]
