"""
Error Definitions

Defines the exception classes raised by keymodel for unified error handling.
"""

from typing import Any, Optional


class KeyModelError(Exception):
    """
    keymodel Base Exception

    Base class for all custom exceptions, containing error message, code and details.
    """

    def __init__(
        self,
        message: str,
        code: str = "keymodel_error",
        details: Optional[dict[str, Any]] = None,
    ):
        """
        Initialize exception

        Args:
            message: Error message
            code: Error code
            details: Extra error details
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary format

        Returns:
            dict: Error information dictionary
        """
        result = {
            "error": {
                "message": self.message,
                "type": type(self).__name__,
                "code": self.code,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result


class InvalidModelError(KeyModelError):
    """
    Invalid Model Error

    Raised when a model name is empty or not a string.
    """

    def __init__(
        self,
        message: str = "Model name unspecified",
        code: str = "invalid_model",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message=message, code=code, details=details)


class NoPrimaryKeyError(KeyModelError):
    """
    No Primary Key Error

    Raised when a model declares no key-marked field.
    """

    def __init__(self, model_name: str):
        super().__init__(
            message=f"No primary key specified for model {model_name!r}",
            code="no_primary_key",
            details={"model": model_name},
        )
        self.model_name = model_name


class InvalidArrayDefinitionError(KeyModelError):
    """
    Invalid Array Definition Error

    Raised when a collection field is declared with a sequence whose length is not 1.
    """

    def __init__(self, field: str, length: int):
        super().__init__(
            message=f'Invalid field length for "{field}": expected 1 element type, got {length}',
            code="invalid_array_definition",
            details={"field": field, "length": length},
        )
        self.field = field


class InvalidTypeError(KeyModelError):
    """
    Invalid Type Error

    Raised when a field's type expression cannot be resolved.
    """

    def __init__(self, field: str, type_expression: Any):
        super().__init__(
            message=f"Invalid type {type_expression!r} for field {field!r}",
            code="invalid_type",
            details={"field": field, "type": repr(type_expression)},
        )
        self.field = field
        self.type_expression = type_expression


class InvalidValueError(KeyModelError):
    """
    Invalid Value Error

    Raised when instance values do not satisfy the model schema,
    either on creation or before a save.
    """

    def __init__(self, field: str, model_name: str, value: Any = None):
        super().__init__(
            message=f"Invalid value for field {field!r} of model {model_name!r}: {value!r}",
            code="invalid_value",
            details={"field": field, "model": model_name},
        )
        self.field = field
        self.model_name = model_name


class StoreError(KeyModelError):
    """
    Store Error

    Raised when the key-value store fails while executing a command batch.
    The underlying exception is available as ``cause`` and ``__cause__``.
    """

    def __init__(self, cause: BaseException, operation: str = "execute"):
        super().__init__(
            message=f"Store {operation} failed: {cause}",
            code="store_error",
            details={"operation": operation},
        )
        self.cause = cause
        self.operation = operation


class TypeRegistrationError(KeyModelError):
    """
    Type Registration Error

    Raised when registering a type with an empty or duplicate name.
    """

    def __init__(self, message: str, name: Any = None):
        super().__init__(
            message=message,
            code="type_registration_error",
            details={"name": name},
        )
        self.name = name
