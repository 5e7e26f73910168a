"""
Instance Repository Redis Implementation

Maps instances onto flat Redis keys, one key per field:

- scalar fields are plain string keys (GET/SET)
- collection fields are sets (SMEMBERS/SADD)

Every operation runs as a single pipeline round trip. With ``transaction``
enabled the pipeline is wrapped in MULTI/EXEC, so no other client observes a
partially applied batch. Saves that rewrite a collection field always run
in MULTI/EXEC.
"""

import logging
from typing import Any, Mapping, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from keymodel.common.errors import StoreError
from keymodel.domain.schema import CompiledSchema, SaveOptions
from keymodel.repositories.instance_repo import InstanceRepository
from keymodel.schema.keys import derive_key, field_key
from keymodel.schema.validator import Validator
from keymodel.types.registry import TypeRegistry, type_registry

logger = logging.getLogger(__name__)

SEQUENCE_REPLIES = (list, tuple, set, frozenset)


class RedisInstanceRepository(InstanceRepository):
    """
    Instance Repository Redis Implementation

    Replies are matched to fields by position, so commands are always
    enqueued in schema field order.
    """

    def __init__(
        self,
        client: Redis,
        transaction: bool = True,
        registry: Optional[TypeRegistry] = None,
    ):
        """
        Initialize Repository

        Args:
            client: Async Redis client instance
            transaction: Wrap each batch in MULTI/EXEC
            registry: Type registry used to parse and encode values
        """
        self.client = client
        self.transaction = transaction
        self.registry = registry or type_registry
        self.validator = Validator(self.registry)

    async def _execute(self, pipe: Any, operation: str, raise_on_error: bool = True) -> list[Any]:
        try:
            return await pipe.execute(raise_on_error=raise_on_error)
        except (RedisError, OSError) as exc:
            logger.warning(f"Redis {operation} batch failed: {exc}")
            raise StoreError(exc, operation) from exc

    async def get(
        self, schema: CompiledSchema, key_values: Mapping[str, Any]
    ) -> Optional[dict[str, Any]]:
        """Get entity values by key, returns None if not found, expired or invalid"""
        prefix = derive_key(schema, key_values)
        asked = list(schema.fields.values())

        async with self.client.pipeline(transaction=self.transaction) as pipe:
            for definition in asked:
                key = field_key(prefix, definition.name)
                if definition.is_collection:
                    logger.debug(f"DB.smembers({key})")
                    pipe.smembers(key)
                else:
                    logger.debug(f"DB.get({key})")
                    pipe.get(key)
            # Per-command errors (e.g. WRONGTYPE) come back as reply values
            replies = await self._execute(pipe, "get", raise_on_error=False)

        values: dict[str, Any] = {}
        for definition, reply in zip(asked, replies):
            if definition.is_collection:
                if not isinstance(reply, SEQUENCE_REPLIES):
                    logger.debug(
                        f"Received {reply!r} for key={definition.name} but a set was expected"
                    )
                    return None
                values[definition.name] = self.registry.parse(definition, reply)
            else:
                if isinstance(reply, Exception):
                    logger.debug(f"Received error {reply!r} for key={definition.name}")
                    reply = None
                values[definition.name] = self.registry.parse(definition, reply)

        logger.debug(f"Validating: {values!r}")
        if not self.validator.validate(schema, values):
            # Not found or invalid
            return None
        return values

    async def save(
        self,
        schema: CompiledSchema,
        values: Mapping[str, Any],
        options: Optional[SaveOptions] = None,
    ) -> None:
        """Write every field, attaching the optional expiry to each written key"""
        options = options or SaveOptions()
        prefix = derive_key(schema, values)

        # DEL + SADD of a collection must apply atomically
        has_collection = any(definition.is_collection for definition in schema.fields.values())
        transaction = self.transaction or has_collection

        async with self.client.pipeline(transaction=transaction) as pipe:
            for definition in schema.fields.values():
                key = field_key(prefix, definition.name)
                encoded = self.registry.encode(definition, values.get(definition.name))

                if not definition.is_collection:
                    logger.debug(f"DB.set({key}, {encoded!r}, PX={options.PX}, EX={options.EX})")
                    if options.PX is not None:
                        pipe.set(key, encoded, px=options.PX)
                    elif options.EX is not None:
                        pipe.set(key, encoded, ex=options.EX)
                    else:
                        pipe.set(key, encoded)
                    continue

                # Replace the stored set rather than merging into it
                logger.debug(f"DB.delete({key})")
                pipe.delete(key)
                for member in encoded:
                    logger.debug(f"DB.sadd({key}, {member!r})")
                    pipe.sadd(key, member)

                # SADD cannot carry an expiry
                if encoded:
                    if options.PX is not None:
                        logger.debug(f"DB.pexpire({key}, {options.PX})")
                        pipe.pexpire(key, options.PX)
                    elif options.EX is not None:
                        logger.debug(f"DB.expire({key}, {options.EX})")
                        pipe.expire(key, options.EX)

            await self._execute(pipe, "save")

    async def remove(self, schema: CompiledSchema, values: Mapping[str, Any]) -> None:
        """Delete every field key of the entity"""
        prefix = derive_key(schema, values)

        async with self.client.pipeline(transaction=self.transaction) as pipe:
            for name in schema.fields:
                key = field_key(prefix, name)
                logger.debug(f"DB.delete({key})")
                pipe.delete(key)

            await self._execute(pipe, "remove")
