"""
Type Registry Unit Tests
"""

import pytest

from keymodel.common.errors import TypeRegistrationError
from keymodel.domain.schema import FieldDefinition
from keymodel.types.registry import (
    NamedType,
    PrimitiveType,
    RegexType,
    TypeRegistry,
    encode_scalar,
    split_expression,
)


class LoginString:
    """Object whose string form is an email address"""

    def __str__(self):
        return "login@server.com"


class TestSplitExpression:
    """Type expression tokenizer tests"""

    def test_single_token(self):
        assert split_expression("string") == ["string"]

    def test_strips_whitespace(self):
        assert split_expression(" Email |Lowercase ") == ["Email", "Lowercase"]

    def test_regex_keeps_pipe(self):
        assert split_expression("/^(a|b)$/ | string") == ["/^(a|b)$/", "string"]

    def test_empty_alternative(self):
        assert split_expression("string |") == ["string", ""]
        assert split_expression("") == [""]

    def test_removes_inner_whitespace(self):
        assert split_expression("Lower case | Email") == ["Lowercase", "Email"]
        assert split_expression("Hex\tColor") == ["HexColor"]

    def test_regex_keeps_inner_whitespace(self):
        assert split_expression("/a b/ | string") == ["/a b/", "string"]

    def test_inner_whitespace_resolves(self, registry):
        assert registry.is_valid_expression("Lower case") is True
        assert registry.validate("Lower case", "abc") is True
        assert registry.validate("Lower case", "ABC") is False


class TestRegistration:
    """Registration tests"""

    def test_builtins_registered(self, registry):
        assert registry.is_registered("string")
        assert registry.is_registered("number")
        assert registry.is_registered("boolean")

    def test_duplicate_name_rejected(self, registry):
        with pytest.raises(TypeRegistrationError, match="already defined"):
            registry.register("string", "string")

    def test_empty_name_rejected(self, registry):
        with pytest.raises(TypeRegistrationError):
            registry.register("")
        with pytest.raises(TypeRegistrationError):
            registry.register(None)

    def test_whitespace_name_rejected(self, registry):
        with pytest.raises(TypeRegistrationError, match="Invalid type name"):
            registry.register("Licence plate", "string")

    def test_unknown_primitive_kind_rejected(self, registry):
        with pytest.raises(TypeRegistrationError):
            registry.register("Money", "decimal")

    def test_derived_type_with_predicate(self, registry):
        registry.register("Positive", "number", lambda value: value > 0)

        assert registry.validate("Positive", 3) is True
        assert registry.validate("Positive", -3) is False
        assert registry.validate("Positive", "3") is False
        assert registry.resolve_primitive("Positive") == "number"

    def test_registered_name_shadows_validator(self, registry):
        registry.register("Email", "string")
        assert isinstance(registry.resolve("Email"), PrimitiveType)
        assert registry.validate("Email", "not an email") is True


class TestResolve:
    """Token resolution order tests"""

    def test_primitive(self, registry):
        resolved = registry.resolve("number")
        assert isinstance(resolved, PrimitiveType)
        assert resolved.kind == "number"

    def test_regex(self, registry):
        assert isinstance(registry.resolve("/^[a-z]+$/"), RegexType)

    def test_invalid_regex(self, registry):
        assert registry.resolve("/([a-z/") is None

    def test_validator_function(self, registry):
        resolved = registry.resolve("Email")
        assert isinstance(resolved, NamedType)

    def test_unknown(self, registry):
        assert registry.resolve("Nonsense") is None
        assert registry.is_valid_expression("string | Nonsense") is False

    def test_custom_validator_set(self):
        registry = TypeRegistry(validators={"isEven": lambda value: int(str(value)) % 2 == 0})
        assert registry.is_valid_expression("Even") is True
        assert registry.is_valid_expression("Email") is False
        assert registry.validate("Even | number", 4) is True
        assert registry.validate("Even | number", 5) is False


class TestResolvePrimitive:
    """Primitive resolution tests"""

    def test_single_primitive(self, registry):
        assert registry.resolve_primitive("Email | Lowercase | string") == "string"

    def test_no_primitive(self, registry):
        assert registry.resolve_primitive("Email | Lowercase") is None

    def test_two_primitives(self, registry):
        assert registry.resolve_primitive("string | number") is None


class TestValidatePrimitives:
    """Primitive validation tests"""

    def test_numbers(self, registry):
        assert registry.validate("number", "1") is False
        assert registry.validate("number", "1.1") is False
        assert registry.validate("number", "-1") is False
        assert registry.validate("number", 1) is True
        assert registry.validate("number", 1.1) is True
        assert registry.validate("number", -1) is True

    def test_bool_is_not_number(self, registry):
        assert registry.validate("number", True) is False

    def test_strings(self, registry):
        assert registry.validate("string", []) is False
        assert registry.validate("string", {}) is False
        assert registry.validate("string", 1) is False
        assert registry.validate("string", True) is False
        assert registry.validate("string", "[]") is True

    def test_booleans(self, registry):
        assert registry.validate("boolean", False) is True
        assert registry.validate("boolean", "false") is False
        assert registry.validate("boolean", 0) is False


class TestValidateComposite:
    """Composite expressions require every type to pass"""

    def test_email_lowercase(self, registry):
        assert registry.validate("Email | Lowercase", "LOGIN@server.com") is False
        assert registry.validate("Email | Lowercase", "login@server.com") is True
        assert registry.validate("Email | Lowercase", "lorem ipsum") is False

    def test_email_lowercase_type_coercion(self, registry):
        assert registry.validate("Email | Lowercase", LoginString()) is True
        assert registry.validate("Email | Lowercase | string", LoginString()) is False

    def test_number_type_coercion(self, registry):
        assert registry.validate("Float", 5.5) is True
        assert registry.validate("Float", "5.5") is True
        assert registry.validate("Float | number", "5.5") is False
        assert registry.validate("Float | number", 5.5) is True

    def test_regex_and_primitive(self, registry):
        assert registry.validate("/^[A-Z]{2}[0-9]+$/ | string", "XY42") is True
        assert registry.validate("/^[A-Z]{2}[0-9]+$/ | string", "xy42") is False

    def test_regex_tests_string_form(self, registry):
        assert registry.validate("/^4[0-9]$/", 42) is True

    def test_unresolvable_token_never_matches(self, registry):
        assert registry.validate("string | Nonsense", "anything") is False


class TestValidateNone:
    """A missing value satisfies no type"""

    def test_validator_function(self, registry):
        assert registry.validate("Alpha", None) is False
        assert registry.validate("Lowercase", None) is False

    def test_regex(self, registry):
        assert registry.validate("/.*/", None) is False
        assert registry.validate("/None/", None) is False

    def test_registered_types(self, registry):
        registry.register("Tag")
        registry.register("Anything", predicate=lambda value: True)

        assert registry.validate("Tag", "x") is True
        assert registry.validate("Tag", None) is False
        assert registry.validate("Anything", None) is False
        assert registry.validate("string", None) is False


class TestParse:
    """Stored value coercion tests"""

    def field(self, expression, collection=False):
        return FieldDefinition(name="f", type_expression=expression, is_collection=collection)

    def test_string_identity(self, registry):
        assert registry.parse(self.field("string"), "7") == "7"

    def test_number(self, registry):
        assert registry.parse(self.field("number"), "5.5") == 5.5
        value = registry.parse(self.field("number"), "7")
        assert value == 7
        assert isinstance(value, int)

    def test_unparseable_number_is_none(self, registry):
        assert registry.parse(self.field("number"), "seven") is None
        assert registry.parse(self.field("number"), "nan") is None
        assert registry.parse(self.field("number"), None) is None

    def test_boolean(self, registry):
        assert registry.parse(self.field("boolean"), "true") is True
        assert registry.parse(self.field("boolean"), "false") is False
        assert registry.parse(self.field("boolean"), "yes") is None

    def test_no_primitive_identity(self, registry):
        assert registry.parse(self.field("Email"), "a@b.io") == "a@b.io"

    def test_collection_elementwise(self, registry):
        parsed = registry.parse(self.field("number", collection=True), {"1", "2.5"})
        assert sorted(parsed) == [1, 2.5]

    def test_bytes_decoded(self, registry):
        assert registry.parse(self.field("string"), b"abc") == "abc"

    @pytest.mark.parametrize("value", [5.5, -3, 0, 1700000000000, True, False, "text"])
    def test_parse_inverts_encode(self, registry, value):
        expression = {bool: "boolean", str: "string"}.get(type(value), "number")
        field = self.field(expression)
        assert registry.parse(field, registry.encode(field, value)) == value


class TestEncodeScalar:
    """Scalar encoding tests"""

    def test_integral_float(self):
        assert encode_scalar(7.0) == "7"

    def test_float(self):
        assert encode_scalar(5.5) == "5.5"

    def test_bool(self):
        assert encode_scalar(True) == "true"
        assert encode_scalar(False) == "false"

    def test_none_rejected(self):
        with pytest.raises(TypeError):
            encode_scalar(None)
