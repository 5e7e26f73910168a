"""
Key Derivation Module

Store keys have the layout ``<model>:<key values joined by "__">:<field>``.
Key values are taken in lexicographic order of their field names, so every
process derives the same key for the same entity regardless of declaration order.
"""

import logging
from typing import Any, Mapping

from keymodel.domain.schema import CompiledSchema
from keymodel.types.registry import encode_scalar

logger = logging.getLogger(__name__)

KEY_SEPARATOR = ":"
KEY_VALUE_SEPARATOR = "__"


def key_fields(schema: CompiledSchema) -> list[str]:
    """Key field names sorted lexicographically"""
    return schema.key_fields


def derive_key(schema: CompiledSchema, values: Mapping[str, Any]) -> str:
    """
    Derive the store key prefix for an entity

    A missing key value yields an empty segment instead of an error; the
    resulting key is well-formed but matches nothing that was saved.

    Args:
        schema: Compiled schema
        values: Field values; only key fields are read

    Returns:
        str: Key prefix ending with the separator, e.g. ``"vehicle:1700000000__X2:"``
    """
    parts = []
    for name in key_fields(schema):
        value = values.get(name)
        if value is None or value == "":
            logger.debug(f'No key "{name}" specified for model {schema.name}')
            parts.append("")
        else:
            parts.append(encode_scalar(value))

    return schema.name + KEY_SEPARATOR + KEY_VALUE_SEPARATOR.join(parts) + KEY_SEPARATOR


def field_key(prefix: str, field_name: str) -> str:
    return prefix + field_name
