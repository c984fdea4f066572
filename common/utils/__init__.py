"""
Utilities module - Common helpers for API responses.
"""

from common.utils.responses import success_response, error_response

__all__ = [
    "success_response",
    "error_response",
]
