from ._dtype import DEFAULT_DTYPE, DType
from ._errors import (
    IndexArityError,
    OperationNotImplementedError,
    ShapeMismatchError,
    StorageError,
    TypeMismatchError,
    UnsupportedConversionError,
)
from ._shape import DEFAULT_LAYOUT, IShape, Layout
from ._storage import IStorage
