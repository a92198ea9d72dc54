# Infrastructure Storage Adapters Package
from .kv import FileKeyValueStore, InMemoryKeyValueStore
from .repositories import JsonCardRepository, JsonDeckRepository, JsonStatsRepository

__all__ = [
    "InMemoryKeyValueStore",
    "FileKeyValueStore",
    "JsonDeckRepository",
    "JsonCardRepository",
    "JsonStatsRepository",
]
