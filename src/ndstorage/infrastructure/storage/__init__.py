from ._indexing import StorageIndexingMixin
from ._storage import Storage

__all__ = [Storage.__name__, StorageIndexingMixin.__name__]
