"""Pipeline layer.

Resolves a bundle's schema and dispatches it to the matching builder.
"""

from .run import SUPPORTED_DATA_TYPES, UnsupportedDataTypeError, transform_bundle, write_result

__all__ = ["SUPPORTED_DATA_TYPES", "UnsupportedDataTypeError", "transform_bundle", "write_result"]
