"""
keymodel

Async object mapping of typed models onto flat Redis keys.
"""

from keymodel.common.errors import (
    InvalidArrayDefinitionError,
    InvalidModelError,
    InvalidTypeError,
    InvalidValueError,
    KeyModelError,
    NoPrimaryKeyError,
    StoreError,
    TypeRegistrationError,
)
from keymodel.domain.schema import CompiledSchema, FieldDefinition, SaveOptions
from keymodel.model import Instance, Model, define_model
from keymodel.types.registry import TypeRegistry, register_type, type_registry

__version__ = "0.1.0"

__all__ = [
    "CompiledSchema",
    "FieldDefinition",
    "Instance",
    "InvalidArrayDefinitionError",
    "InvalidModelError",
    "InvalidTypeError",
    "InvalidValueError",
    "KeyModelError",
    "Model",
    "NoPrimaryKeyError",
    "SaveOptions",
    "StoreError",
    "TypeRegistrationError",
    "TypeRegistry",
    "define_model",
    "register_type",
    "type_registry",
]
