"""
Type Registry Module

Resolves type expressions into validation predicates and primitive coercions.

A type expression is one or more type names joined by ``|``. A value is valid
for the expression only when it satisfies *every* named type, so
``"Email | Lowercase"`` accepts lower-case email addresses only.

Each token resolves in this order:
1. A registered type name (``string``, ``number``, ``boolean`` or a derived type)
2. A regular expression literal delimited by slashes, e.g. ``/^[a-z]+$/``
3. A validator function named ``is<Token>`` in the validator set
4. Otherwise the expression is invalid
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from keymodel.common.errors import TypeRegistrationError
from keymodel.types.validators import DEFAULT_VALIDATORS, Predicate, validator_name

logger = logging.getLogger(__name__)

PRIMITIVE_KINDS: tuple[str, ...] = ("string", "number", "boolean")

_REGEX_TOKEN = re.compile(r"/(?:\\.|[^/\\])*/")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class PrimitiveType:
    """
    Registered type bound to a scalar kind, optionally refined by a predicate

    None (a missing field) never satisfies a type, whatever its kind.
    """

    name: str
    kind: Optional[str] = None
    predicate: Optional[Predicate] = None

    def check(self, value: Any) -> bool:
        if value is None:
            return False
        if self.kind is not None and not _is_kind(self.kind, value):
            return False
        if self.predicate is not None:
            return bool(self.predicate(value))
        return True


@dataclass(frozen=True)
class RegexType:
    """Regular expression literal tested against the string form of a value"""

    pattern: re.Pattern

    def check(self, value: Any) -> bool:
        if value is None:
            return False
        text = value if isinstance(value, str) else str(value)
        return self.pattern.search(text) is not None


@dataclass(frozen=True)
class NamedType:
    """Type backed by a function from the validator set"""

    name: str
    predicate: Predicate

    def check(self, value: Any) -> bool:
        if value is None:
            return False
        return bool(self.predicate(value))


ResolvedType = Union[PrimitiveType, RegexType, NamedType]


def _is_kind(kind: str, value: Any) -> bool:
    if kind == "string":
        return isinstance(value, str)
    if kind == "number":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return not (isinstance(value, float) and math.isnan(value))
    if kind == "boolean":
        return isinstance(value, bool)
    return False


def split_expression(expression: str) -> list[str]:
    """
    Split a type expression into its tokens

    Whitespace is removed from every token, so ``"Lower case"`` reads as
    ``"Lowercase"``. A slash-delimited regex token is kept whole, whitespace
    and ``|`` included.

    Args:
        expression: Type expression, e.g. ``"Email | Lowercase"``

    Returns:
        list[str]: Tokens; an empty string marks an empty alternative
    """
    tokens = []
    rest = expression.strip()
    while True:
        token = None
        if rest.startswith("/"):
            match = _REGEX_TOKEN.match(rest)
            if match:
                remainder = rest[match.end():].lstrip()
                if not remainder or remainder.startswith("|"):
                    token = match.group(0)
                    rest = remainder
        if token is None:
            token, separator, tail = rest.partition("|")
            token = _WHITESPACE.sub("", token)
            rest = separator + tail
        tokens.append(token)
        if not rest.startswith("|"):
            break
        rest = rest[1:].strip()
    return tokens


def is_regex_token(token: str) -> bool:
    return len(token) >= 2 and token.startswith("/") and token.endswith("/")


class TypeRegistry:
    """
    Type Registry

    Holds registered type names and the validator set consulted for
    ``is<Name>`` lookups. Registration is append-only.
    """

    def __init__(self, validators: Optional[Mapping[str, Predicate]] = None):
        """
        Initialize registry with the built-in primitives

        Args:
            validators: Validator set used for ``is<Name>`` lookups,
                defaults to the built-in validator functions
        """
        self._types: dict[str, PrimitiveType] = {}
        self._validators: dict[str, Predicate] = dict(
            DEFAULT_VALIDATORS if validators is None else validators
        )
        for kind in PRIMITIVE_KINDS:
            self.register(kind, kind)

    def register(
        self,
        name: str,
        primitive_kind: Optional[str] = None,
        predicate: Optional[Callable[[Any], bool]] = None,
    ) -> None:
        """
        Register a named type

        Args:
            name: Type name used in type expressions
            primitive_kind: "string", "number" or "boolean", if the type is stored as a scalar of that kind
            predicate: Extra check a value must pass

        Raises:
            TypeRegistrationError: Empty name, duplicate name or unknown primitive kind
        """
        if not name or not isinstance(name, str):
            raise TypeRegistrationError("Type name must be a non-empty string", name)
        if "|" in name or is_regex_token(name) or _WHITESPACE.search(name):
            raise TypeRegistrationError(f"Invalid type name {name!r}", name)
        if name in self._types:
            raise TypeRegistrationError(f"Type {name!r} is already defined.", name)
        if primitive_kind is not None and primitive_kind not in PRIMITIVE_KINDS:
            raise TypeRegistrationError(
                f"Unknown primitive kind {primitive_kind!r} for type {name!r}", name
            )

        self._types[name] = PrimitiveType(name=name, kind=primitive_kind, predicate=predicate)
        logger.debug(f"Type registered: {name} (primitive={primitive_kind})")

    def is_registered(self, name: str) -> bool:
        return name in self._types

    def names(self) -> list[str]:
        return list(self._types)

    def resolve(self, token: str) -> Optional[ResolvedType]:
        """
        Resolve a single type token

        Returns:
            Optional[ResolvedType]: The resolved type, or None if the token is unknown
        """
        registered = self._types.get(token)
        if registered is not None:
            return registered

        if is_regex_token(token):
            try:
                return RegexType(pattern=re.compile(token[1:-1]))
            except re.error:
                logger.debug(f"Invalid regular expression type: {token}")
                return None

        if token:
            predicate = self._validators.get(validator_name(token))
            if predicate is not None:
                return NamedType(name=token, predicate=predicate)

        return None

    def resolve_primitive(self, expression: str) -> Optional[str]:
        """
        Get the primitive kind implied by a type expression

        Returns the kind only when exactly one token names a primitive type.
        """
        kinds = [
            self._types[token].kind
            for token in split_expression(expression)
            if token in self._types and self._types[token].kind is not None
        ]
        if len(kinds) == 1:
            return kinds[0]
        return None

    def is_valid_expression(self, expression: Any) -> bool:
        """Check that every token of the expression resolves"""
        if not isinstance(expression, str):
            return False
        return all(self.resolve(token) is not None for token in split_expression(expression))

    def validate(self, expression: str, value: Any) -> bool:
        """
        Validate a value against a type expression

        The value must satisfy every token of the expression.
        Unresolvable tokens never match.
        """
        for token in split_expression(expression):
            resolved = self.resolve(token)
            if resolved is None or not resolved.check(value):
                return False
        return True

    def validate_all(self, expression: str, values: Iterable[Any]) -> bool:
        return all(self.validate(expression, value) for value in values)

    def parse(self, field: Any, raw: Any) -> Any:
        """
        Convert a stored representation back to a typed value

        Args:
            field: Field definition with ``type_expression`` and ``is_collection``
            raw: Reply from the store; an iterable for collection fields

        Returns:
            Any: The typed value; None when a scalar token cannot be parsed
        """
        if field.is_collection:
            return [self.parse_scalar(field.type_expression, element) for element in raw]
        return self.parse_scalar(field.type_expression, raw)

    def parse_scalar(self, expression: str, raw: Any) -> Any:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")

        primitive = self.resolve_primitive(expression)
        if primitive is None or raw is None:
            return raw
        if primitive == "string":
            return raw
        if primitive == "number":
            return _parse_number(raw)
        if raw == "true":
            return True
        if raw == "false":
            return False
        return None

    def encode(self, field: Any, value: Any) -> Any:
        """
        Convert a typed value to its stored representation

        Collection fields encode element-wise.
        """
        if field.is_collection:
            return [encode_scalar(element) for element in value]
        return encode_scalar(value)


def _parse_number(raw: Any) -> Optional[Union[int, float]]:
    text = str(raw).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def encode_scalar(value: Any) -> str:
    """Stored text of a scalar value; inverse of TypeRegistry.parse_scalar"""
    if value is None:
        raise TypeError("None has no stored representation")
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


# Process-wide registry, populated with the built-in primitives at import
type_registry = TypeRegistry()


def register_type(
    name: str,
    primitive_kind: Optional[str] = None,
    predicate: Optional[Callable[[Any], bool]] = None,
) -> None:
    """Register a type on the process-wide registry"""
    type_registry.register(name, primitive_kind, predicate)
