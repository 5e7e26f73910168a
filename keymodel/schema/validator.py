"""
Instance Validator Module

Checks candidate instance values against a compiled schema.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from keymodel.common.errors import InvalidValueError
from keymodel.domain.schema import CompiledSchema, FieldDefinition
from keymodel.types.registry import TypeRegistry, type_registry

logger = logging.getLogger(__name__)

COLLECTION_TYPES = (list, tuple, set, frozenset)


@dataclass(frozen=True)
class ValidationResult:
    """
    Validation outcome

    Attributes:
        valid: Whether every field passed
        field: First offending field in declaration order, None when valid
    """

    valid: bool
    field: Optional[str] = None

    def __bool__(self) -> bool:
        return self.valid


class Validator:
    """Applies a schema's per-field type expressions to value mappings"""

    def __init__(self, registry: Optional[TypeRegistry] = None):
        self.registry = registry or type_registry

    def validate(self, schema: CompiledSchema, values: Mapping[str, Any]) -> ValidationResult:
        for name, definition in schema.fields.items():
            value = values.get(name)
            if not self.validate_field(definition, value):
                logger.debug(f"Invalid value for {schema.name}.{name}: {value!r}")
                return ValidationResult(valid=False, field=name)
        return ValidationResult(valid=True)

    def validate_field(self, definition: FieldDefinition, value: Any) -> bool:
        if definition.is_collection:
            if not isinstance(value, COLLECTION_TYPES):
                return False
            return self.registry.validate_all(definition.type_expression, value)
        return self.registry.validate(definition.type_expression, value)

    def ensure_valid(self, schema: CompiledSchema, values: Mapping[str, Any]) -> None:
        """
        Raise if the values do not satisfy the schema

        Raises:
            InvalidValueError: Carrying the first offending field and the model name
        """
        result = self.validate(schema, values)
        if not result.valid:
            raise InvalidValueError(result.field, schema.name, values.get(result.field))
