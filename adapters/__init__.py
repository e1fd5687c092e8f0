"""
Adapters package - External service connections.
MongoDB client lifecycle and local media storage.
"""

from adapters import media_storage, mongo_adapter

__all__ = [
    "media_storage",
    "mongo_adapter",
]
