"""
Domain Model Module Initialization
"""

from keymodel.domain.schema import CompiledSchema, FieldDefinition, SaveOptions

__all__ = [
    "CompiledSchema",
    "FieldDefinition",
    "SaveOptions",
]
