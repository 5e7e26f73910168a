"""
Instance Repository Interface

Defines the data access interface for model instances.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from keymodel.domain.schema import CompiledSchema, SaveOptions


class InstanceRepository(ABC):
    """Instance Repository Interface"""

    @abstractmethod
    async def get(
        self, schema: CompiledSchema, key_values: Mapping[str, Any]
    ) -> Optional[dict[str, Any]]:
        """
        Load an entity by its key field values

        Returns None if the entity is missing, expired or does not satisfy the schema.

        Args:
            schema: Compiled schema of the model
            key_values: Values of the key fields

        Returns:
            dict if a valid entity was found, None otherwise
        """
        pass

    @abstractmethod
    async def save(
        self,
        schema: CompiledSchema,
        values: Mapping[str, Any],
        options: Optional[SaveOptions] = None,
    ) -> None:
        """
        Write every field of an entity

        Args:
            schema: Compiled schema of the model
            values: Validated field values
            options: Optional expiry applied to every written key
        """
        pass

    @abstractmethod
    async def remove(self, schema: CompiledSchema, values: Mapping[str, Any]) -> None:
        """
        Delete every field key of an entity

        Args:
            schema: Compiled schema of the model
            values: Field values; only key fields are read
        """
        pass
