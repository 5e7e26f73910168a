"""
Schema Domain Model

Defines compiled schema structures and per-call persistence options.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class FieldDefinition:
    """
    Compiled field definition

    Attributes:
        name: Stored field name, key sigil stripped
        type_expression: Type expression; the element type for collection fields
        is_key: Whether the field participates in the key prefix
        is_collection: Whether the field is stored as a set
        primitive_kind: Scalar kind implied by the type expression, if any
    """

    name: str
    type_expression: str
    is_key: bool = False
    is_collection: bool = False
    primitive_kind: Optional[str] = None


@dataclass(frozen=True)
class CompiledSchema:
    """
    Compiled model schema

    Immutable once built. Field order follows declaration order.

    Attributes:
        name: Model name, used as the first key segment
        fields: Field name to definition mapping
    """

    name: str
    fields: Mapping[str, FieldDefinition] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def key_fields(self) -> list[str]:
        """Key field names in lexicographic order"""
        return sorted(name for name, definition in self.fields.items() if definition.is_key)

    def field_names(self) -> list[str]:
        return list(self.fields)


class SaveOptions(BaseModel):
    """Expiry options for a single save call; PX takes precedence over EX"""

    PX: Optional[int] = Field(None, gt=0, description="Expiry in milliseconds")
    EX: Optional[int] = Field(None, gt=0, description="Expiry in seconds")

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def has_expiry(self) -> bool:
        return self.PX is not None or self.EX is not None
