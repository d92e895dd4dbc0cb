from .endpoint_store import EndpointStore
from .read_write_lock import ReadWriteLock

__all__ = [
    "EndpointStore",
    "ReadWriteLock",
]
