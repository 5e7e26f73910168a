"""
Schema Compiler Module

Compiles a model's field declarations into an immutable CompiledSchema.

Declarations map field names to type expressions:

    {
        "$production_line": "string",      # key field
        "manufacturer": "string",
        "contact": "Email | Lowercase",    # every listed type must pass
        "colors": ["string"],              # collection, stored as a set
    }
"""

import logging
from typing import Any, Mapping, Optional

from keymodel.common.errors import (
    InvalidArrayDefinitionError,
    InvalidModelError,
    InvalidTypeError,
    NoPrimaryKeyError,
)
from keymodel.config import get_settings
from keymodel.domain.schema import CompiledSchema, FieldDefinition
from keymodel.types.registry import TypeRegistry, type_registry

logger = logging.getLogger(__name__)

# Python types accepted in place of primitive type names
TYPE_ALIASES: dict[type, str] = {
    str: "string",
    int: "number",
    float: "number",
    bool: "boolean",
}


class SchemaCompiler:
    """
    Schema Compiler

    Attributes:
        registry: Type registry used to resolve type expressions
        key_sigil: Field name prefix marking key fields
    """

    def __init__(self, registry: Optional[TypeRegistry] = None, key_sigil: Optional[str] = None):
        self.registry = registry or type_registry
        self.key_sigil = key_sigil or get_settings().KEY_FIELD_SIGIL

    def compile(self, name: Any, field_specs: Mapping[str, Any]) -> CompiledSchema:
        """
        Compile field declarations

        Args:
            name: Model name
            field_specs: Field name (optionally sigil-prefixed) to type declaration

        Returns:
            CompiledSchema: The compiled schema

        Raises:
            InvalidModelError: Empty or non-string model name, or an empty field name
            InvalidArrayDefinitionError: Collection declared with other than one element type
            InvalidTypeError: Unresolvable type expression
            NoPrimaryKeyError: No key field declared
        """
        if not name or not isinstance(name, str):
            raise InvalidModelError()
        if not isinstance(field_specs, Mapping):
            raise InvalidModelError(
                f"Field declarations for model {name!r} must be a mapping",
                details={"model": name},
            )

        fields: dict[str, FieldDefinition] = {}
        for declared_name, declaration in field_specs.items():
            definition = self.compile_field(declared_name, declaration)
            if definition.name in fields:
                raise InvalidModelError(
                    f"Field {definition.name!r} declared twice in model {name!r}",
                    details={"model": name, "field": definition.name},
                )
            fields[definition.name] = definition

        if not any(definition.is_key for definition in fields.values()):
            raise NoPrimaryKeyError(name)

        schema = CompiledSchema(name=name, fields=fields)
        logger.debug(f"Model defined: {name} {dict(schema.fields)}")
        return schema

    def compile_field(self, declared_name: str, declaration: Any) -> FieldDefinition:
        if not isinstance(declared_name, str):
            raise InvalidModelError(f"Field name {declared_name!r} must be a string")

        is_key = False
        field_name = declared_name
        if field_name.startswith(self.key_sigil):
            field_name = field_name[len(self.key_sigil):]
            is_key = True
        if not field_name:
            raise InvalidModelError(f"Empty field name {declared_name!r}")

        is_collection = False
        if isinstance(declaration, (list, tuple)):
            if len(declaration) != 1:
                raise InvalidArrayDefinitionError(field_name, len(declaration))
            declaration = declaration[0]
            is_collection = True

        expression = self.normalize(declaration)
        if expression is None or not self.registry.is_valid_expression(expression):
            raise InvalidTypeError(field_name, declaration)

        return FieldDefinition(
            name=field_name,
            type_expression=expression,
            is_key=is_key,
            is_collection=is_collection,
            primitive_kind=self.registry.resolve_primitive(expression),
        )

    def normalize(self, declaration: Any) -> Optional[str]:
        """Type expression for a declaration, or None if it is not one"""
        if isinstance(declaration, str):
            return declaration
        if isinstance(declaration, type):
            return TYPE_ALIASES.get(declaration)
        return None


def compile_schema(
    name: Any,
    field_specs: Mapping[str, Any],
    registry: Optional[TypeRegistry] = None,
) -> CompiledSchema:
    """Compile field declarations with a default SchemaCompiler"""
    return SchemaCompiler(registry).compile(name, field_specs)
