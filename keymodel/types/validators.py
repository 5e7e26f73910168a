"""
Field Validator Functions

Named predicates looked up by type expressions through the ``is<Name>``
convention, e.g. the ``Email`` token resolves to ``isEmail``.

Every predicate checks the string form of its argument, so any object whose
``str()`` is a valid representation passes. A missing value (None) checks as the
empty string.
"""

import ipaddress
import re
import uuid
from datetime import date, datetime
from typing import Any, Callable

from pydantic import EmailStr, TypeAdapter, ValidationError

Predicate = Callable[[Any], bool]

_EMAIL_ADAPTER = TypeAdapter(EmailStr)

# Scheme is optional: "lorem.ipsum.com" is a valid URL
URL_PATTERN = re.compile(
    r"^(?:(?:https?|ftp)://)?"
    r"(?:\S+(?::\S*)?@)?"
    r"(?:localhost|(?:[a-zA-Z0-9\u00a1-\uffff-]+\.)+[a-zA-Z\u00a1-\uffff]{2,}|\d{1,3}(?:\.\d{1,3}){3})"
    r"(?::\d{2,5})?"
    r"(?:[/?#]\S*)?$"
)

INT_PATTERN = re.compile(r"^(?:[-+]?(?:0|[1-9][0-9]*))$")
FLOAT_PATTERN = re.compile(r"^(?:[-+]?(?:[0-9]+))?(?:\.[0-9]*)?(?:[eE][+-]?(?:[0-9]+))?$")
NUMERIC_PATTERN = re.compile(r"^[-+]?[0-9]+$")
ALPHA_PATTERN = re.compile(r"^[a-zA-Z]+$")
ALPHANUMERIC_PATTERN = re.compile(r"^[a-zA-Z0-9]+$")
HEXADECIMAL_PATTERN = re.compile(r"^[0-9a-fA-F]+$")
HEX_COLOR_PATTERN = re.compile(r"^#?(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def is_email(value: Any) -> bool:
    try:
        _EMAIL_ADAPTER.validate_python(_text(value))
        return True
    except ValidationError:
        return False


def is_url(value: Any) -> bool:
    text = _text(value)
    if not text or len(text) > 2083:
        return False
    return bool(URL_PATTERN.match(text))


def is_ip(value: Any) -> bool:
    try:
        ipaddress.ip_address(_text(value))
        return True
    except ValueError:
        return False


def is_ipv4(value: Any) -> bool:
    try:
        ipaddress.IPv4Address(_text(value))
        return True
    except ValueError:
        return False


def is_ipv6(value: Any) -> bool:
    try:
        ipaddress.IPv6Address(_text(value))
        return True
    except ValueError:
        return False


def is_alpha(value: Any) -> bool:
    return bool(ALPHA_PATTERN.match(_text(value)))


def is_alphanumeric(value: Any) -> bool:
    return bool(ALPHANUMERIC_PATTERN.match(_text(value)))


def is_numeric(value: Any) -> bool:
    return bool(NUMERIC_PATTERN.match(_text(value)))


def is_int(value: Any) -> bool:
    return bool(INT_PATTERN.match(_text(value)))


def is_float(value: Any) -> bool:
    text = _text(value)
    if text in ("", ".", "+", "-"):
        return False
    return bool(FLOAT_PATTERN.match(text))


def is_hexadecimal(value: Any) -> bool:
    return bool(HEXADECIMAL_PATTERN.match(_text(value)))


def is_hex_color(value: Any) -> bool:
    return bool(HEX_COLOR_PATTERN.match(_text(value)))


def is_lowercase(value: Any) -> bool:
    text = _text(value)
    return text == text.lower()


def is_uppercase(value: Any) -> bool:
    text = _text(value)
    return text == text.upper()


def is_uuid(value: Any) -> bool:
    try:
        uuid.UUID(_text(value))
        return True
    except ValueError:
        return False


def is_date(value: Any) -> bool:
    """ISO-8601 date or datetime"""
    if isinstance(value, (date, datetime)):
        return True
    text = _text(value)
    try:
        datetime.fromisoformat(text)
        return True
    except ValueError:
        return False


DEFAULT_VALIDATORS: dict[str, Predicate] = {
    "isEmail": is_email,
    "isUrl": is_url,
    "isIP": is_ip,
    "isIPv4": is_ipv4,
    "isIPv6": is_ipv6,
    "isAlpha": is_alpha,
    "isAlphanumeric": is_alphanumeric,
    "isNumeric": is_numeric,
    "isInt": is_int,
    "isFloat": is_float,
    "isHexadecimal": is_hexadecimal,
    "isHexColor": is_hex_color,
    "isLowercase": is_lowercase,
    "isUppercase": is_uppercase,
    "isUUID": is_uuid,
    "isDate": is_date,
}


def validator_name(type_name: str) -> str:
    """Name of the validator function a type token is looked up under"""
    return "is" + type_name
