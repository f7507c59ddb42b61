from backend.storage.kvstore import JsonFileStorage, KeyValueStorage, MemoryStorage

__all__ = ["JsonFileStorage", "KeyValueStorage", "MemoryStorage"]
