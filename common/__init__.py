"""
Common library for reusable infrastructure components.

This package provides generic modules that can be used across projects:

- database: Async MongoDB connection with Beanie ODM
- utils: Standard API responses
- config: Base settings class
"""

from common.database import MongoDB, BaseDocument
from common.config import BaseAppSettings

__all__ = ["MongoDB", "BaseDocument", "BaseAppSettings"]
