"""
Type System Module Initialization
"""

from keymodel.types.registry import (
    NamedType,
    PrimitiveType,
    RegexType,
    TypeRegistry,
    register_type,
    split_expression,
    type_registry,
)
from keymodel.types.validators import DEFAULT_VALIDATORS

__all__ = [
    "DEFAULT_VALIDATORS",
    "NamedType",
    "PrimitiveType",
    "RegexType",
    "TypeRegistry",
    "register_type",
    "split_expression",
    "type_registry",
]
