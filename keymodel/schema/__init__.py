"""
Schema Module Initialization
"""

from keymodel.schema.compiler import SchemaCompiler, compile_schema
from keymodel.schema.keys import derive_key, field_key, key_fields
from keymodel.schema.validator import ValidationResult, Validator

__all__ = [
    "SchemaCompiler",
    "compile_schema",
    "derive_key",
    "field_key",
    "key_fields",
    "ValidationResult",
    "Validator",
]
