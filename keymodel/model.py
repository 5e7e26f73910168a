"""
Model Module

Public API for declaring models and persisting their instances.

    Vehicle = define_model("vehicle", {
        "$production_line": "string",
        "$date_of_production": "number",
        "manufacturer": "string",
        "colors": ["string"],
    })

    tesla = Vehicle.create({...})
    await tesla.save({"PX": 200})
    same = await Vehicle.get({"production_line": "X2", "date_of_production": 1700000000})
    await same.remove()
"""

import logging
from typing import Any, Mapping, Optional, Union

from redis.asyncio import Redis

from keymodel.config import get_settings
from keymodel.db.redis import get_redis
from keymodel.domain.schema import CompiledSchema, SaveOptions
from keymodel.repositories.instance_repo import InstanceRepository
from keymodel.repositories.redis.instance_repo import RedisInstanceRepository
from keymodel.schema.compiler import SchemaCompiler
from keymodel.schema.keys import derive_key
from keymodel.schema.validator import Validator
from keymodel.types.registry import TypeRegistry, type_registry

logger = logging.getLogger(__name__)


class Model:
    """
    Model

    A compiled schema plus factory and lookup operations for its instances.
    The schema is compiled once and never changes afterwards.
    """

    def __init__(
        self,
        name: Any,
        field_specs: Mapping[str, Any],
        client: Optional[Redis] = None,
        registry: Optional[TypeRegistry] = None,
        repository: Optional[InstanceRepository] = None,
    ):
        """
        Define a model

        Args:
            name: Model name, first segment of every store key
            field_specs: Field declarations, see keymodel.schema.compiler
            client: Redis client; defaults to the process-wide client at first use
            registry: Type registry; defaults to the process-wide registry
            repository: Repository overriding the Redis mapping

        Raises:
            InvalidModelError, NoPrimaryKeyError, InvalidArrayDefinitionError, InvalidTypeError
        """
        self.registry = registry or type_registry
        self.schema: CompiledSchema = SchemaCompiler(self.registry).compile(name, field_specs)
        self.validator = Validator(self.registry)
        self._client = client
        self._repository = repository

    @property
    def name(self) -> str:
        return self.schema.name

    @property
    def client(self) -> Redis:
        if self._client is None:
            self._client = get_redis()
        return self._client

    @property
    def repository(self) -> InstanceRepository:
        if self._repository is None:
            self._repository = RedisInstanceRepository(
                self.client,
                transaction=get_settings().REDIS_TRANSACTION,
                registry=self.registry,
            )
        return self._repository

    def key_fields(self) -> list[str]:
        return self.schema.key_fields

    def derive_key(self, values: Mapping[str, Any]) -> str:
        return derive_key(self.schema, values)

    def create(self, values: Mapping[str, Any]) -> "Instance":
        """
        Create a validated instance

        Raises:
            InvalidValueError: If any field does not satisfy the schema
        """
        return Instance(self, values)

    async def get(self, key_values: Mapping[str, Any]) -> Optional["Instance"]:
        """
        Get an instance by its key field values

        Returns:
            Instance if a valid entity is stored under the key, None otherwise

        Raises:
            StoreError: If the store fails
        """
        values = await self.repository.get(self.schema, key_values)
        if values is None:
            return None
        return Instance(self, values)

    def __repr__(self) -> str:
        return f"Model({self.name!r}, fields={self.schema.field_names()!r})"


class Instance:
    """
    Instance

    One validated record of a model. Schema fields are exposed as attributes
    and may be reassigned; values are re-validated on every save.
    Removing an instance deletes its store keys but leaves the object usable.
    """

    __slots__ = ("_model", "_values")

    def __init__(self, model: Model, values: Mapping[str, Any]):
        model.validator.ensure_valid(model.schema, values)
        object.__setattr__(self, "_model", model)
        object.__setattr__(
            self, "_values", {name: values.get(name) for name in model.schema.fields}
        )
        logger.debug(f"Instance created: {self!r}")

    @property
    def model(self) -> Model:
        return self._model

    def __getattr__(self, name: str) -> Any:
        values = object.__getattribute__(self, "_values")
        if name in values:
            return values[name]
        raise AttributeError(
            f"{object.__getattribute__(self, '_model').name!r} instance has no field {name!r}"
        )

    def __setattr__(self, name: str, value: Any) -> None:
        if name not in self._values:
            raise AttributeError(f"{self._model.name!r} instance has no field {name!r}")
        self._values[name] = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instance):
            return NotImplemented
        return self._model is other._model and self._values == other._values

    __hash__ = None

    def __repr__(self) -> str:
        return f"<{self._model.name} {self._values!r}>"

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def get_key(self) -> str:
        """Store key prefix derived from the current key field values"""
        return self._model.derive_key(self._values)

    async def save(self, options: Optional[Union[SaveOptions, Mapping[str, Any]]] = None) -> "Instance":
        """
        Save every field of the instance

        Args:
            options: {"PX": milliseconds} or {"EX": seconds}; PX wins if both are given

        Returns:
            Instance: This instance

        Raises:
            InvalidValueError: If the current values do not satisfy the schema
            StoreError: If the store fails
        """
        if options is not None and not isinstance(options, SaveOptions):
            options = SaveOptions.model_validate(options)

        self._model.validator.ensure_valid(self._model.schema, self._values)
        logger.debug(f"Saving: {self!r}")
        await self._model.repository.save(self._model.schema, self._values, options)
        return self

    async def remove(self) -> None:
        """
        Delete the instance's store keys

        Raises:
            StoreError: If the store fails
        """
        logger.debug(f"Removing: {self!r}")
        await self._model.repository.remove(self._model.schema, self._values)


def define_model(
    name: Any,
    field_specs: Mapping[str, Any],
    client: Optional[Redis] = None,
    registry: Optional[TypeRegistry] = None,
) -> Model:
    """Define a model, see Model"""
    return Model(name, field_specs, client=client, registry=registry)
