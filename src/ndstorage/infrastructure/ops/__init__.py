from .multiply_int32_cpu import (
    multiply_int32_array_cpu,
    multiply_int32_inplace_cpu,
    multiply_int32_scalar_cpu,
)

__all__ = [
    multiply_int32_array_cpu.__name__,
    multiply_int32_inplace_cpu.__name__,
    multiply_int32_scalar_cpu.__name__,
]
