"""
Database module - Generic async MongoDB connection using Beanie ODM.

Provides reusable MongoDB connectivity for any project.

Usage:
    from common.database import MongoDB

    db = MongoDB()
    await db.connect(uri, database_name, models)
    collection = db.get_collection("clients")
"""

from common.database.mongodb import MongoDB, mask_uri
from common.database.base_document import BaseDocument

__all__ = [
    "MongoDB",
    "BaseDocument",
    "mask_uri",
]
