"""
ndstorage: runtime-typed, multi-dimensional array storage.

A `Storage` pairs one flat homogeneous buffer with a `Shape` and a `DType`
tag, and provides shape-aware indexing, partial (sub-tensor) indexing,
dtype conversion and independent cloning.
"""

from .domain._dtype import DEFAULT_DTYPE, DType
from .domain._errors import (
    IndexArityError,
    OperationNotImplementedError,
    ShapeMismatchError,
    StorageError,
    TypeMismatchError,
    UnsupportedConversionError,
)
from .domain._shape import DEFAULT_LAYOUT, IShape, Layout
from .domain._storage import IStorage
from .infrastructure.dtype import convert_buffer
from .infrastructure.shape import Shape
from .infrastructure.storage import Storage

__all__ = [
    "DEFAULT_DTYPE",
    "DEFAULT_LAYOUT",
    DType.__name__,
    IShape.__name__,
    IStorage.__name__,
    IndexArityError.__name__,
    Layout.__name__,
    OperationNotImplementedError.__name__,
    Shape.__name__,
    ShapeMismatchError.__name__,
    Storage.__name__,
    StorageError.__name__,
    TypeMismatchError.__name__,
    UnsupportedConversionError.__name__,
    convert_buffer.__name__,
]
