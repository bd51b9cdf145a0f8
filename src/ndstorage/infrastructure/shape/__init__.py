from ._shape import Shape, strides_from_dimensions

__all__ = [Shape.__name__, strides_from_dimensions.__name__]
