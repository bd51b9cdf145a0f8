"""
Dtype conversion registry.

This module owns the conversion dispatch table: one entry per ordered
(source dtype, target dtype) pair that has a defined conversion rule. The
rules themselves are registered by `_conversions` (imported for its side
effects by the package `__init__`).

Pairs without a rule are not silently passed through: looking one up raises
`UnsupportedConversionError`.
"""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from ...domain._dtype import DType
from ...domain._errors import UnsupportedConversionError
from ...domain.utils._dispatch_table import create_dispatch_table

conversion_table = create_dispatch_table(
    "conversion", on_missing=UnsupportedConversionError
)
"""Dispatch table mapping (source DType, target DType) to a conversion rule."""


def as_buffer(values: Any, order: str = "C") -> np.ndarray:
    """
    Normalize caller-supplied values to a flat numpy buffer.

    Numpy arrays are flattened without copying when numpy can provide a view;
    sequences are materialized with numpy's own kind inference.

    Parameters
    ----------
    values : Any
        Numpy array or (nested) sequence.
    order : str, optional
        Numpy order code used to flatten multi-dimensional input.
    """
    arr = values if isinstance(values, np.ndarray) else np.asarray(values)
    if arr.ndim != 1:
        arr = arr.reshape(-1, order=order)
    return arr


def convert_buffer(
    buffer: Any, target: Any, source: Optional[Any] = None
) -> np.ndarray:
    """
    Convert every element of a buffer to the target kind.

    Parameters
    ----------
    buffer : Any
        Flat buffer (or sequence).
    target : Any
        Target kind; anything `DType.of` accepts.
    source : Any, optional
        Kind the buffer is known to hold. Inferred with `DType.infer` when
        omitted.

    Returns
    -------
    np.ndarray
        A new buffer of the same length holding ``target`` elements. Never
        aliases ``buffer``.

    Raises
    ------
    UnsupportedConversionError
        If no rule is registered for the (source, target) pair.
    """
    arr = as_buffer(buffer)
    source = DType.infer(arr) if source is None else DType.of(source)
    target = DType.of(target)
    rule = conversion_table.lookup(source, target)
    return rule(arr, target)


def can_convert(source: Any, target: Any) -> bool:
    return conversion_table.supports(DType.of(source), DType.of(target))
