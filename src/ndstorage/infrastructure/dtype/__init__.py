"""
Dtype conversion package.

Importing this package registers every conversion rule in `conversion_table`.
"""

from ._registry import as_buffer, can_convert, conversion_table, convert_buffer
from ._conversions import *

__all__ = [
    as_buffer.__name__,
    can_convert.__name__,
    "conversion_table",
    convert_buffer.__name__,
    object_buffer.__name__,
    wrap_integer.__name__,
]
