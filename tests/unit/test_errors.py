"""Unit tests for error types."""

from refract.core.errors import (
    AmbiguousMethodError,
    InvalidArgumentError,
    NoSuchMethodError,
    RefractError,
    RegistryError,
    TypeExpressionError,
)
from refract.types.registry import TypeRegistry


def test_hierarchy() -> None:
    assert issubclass(InvalidArgumentError, ValueError)
    assert issubclass(NoSuchMethodError, LookupError)
    for error in (InvalidArgumentError, NoSuchMethodError, RegistryError, TypeExpressionError):
        assert issubclass(error, RefractError)


def test_ambiguous_message(registry: TypeRegistry) -> None:
    owner = registry.get("String")
    candidates = [
        registry.method("String", "compareTo", "String"),
        registry.method("Comparable", "compareTo", "Object"),
    ]
    error = AmbiguousMethodError("compareTo", owner, [None], candidates)

    assert error.method_name == "compareTo"
    assert error.parameter_types == (None,)
    assert str(error) == (
        "Found multiple candidates for method compareTo(null) on class java.lang.String : "
        "[public int java.lang.String.compareTo(java.lang.String),"
        "public int java.lang.Comparable.compareTo(java.lang.Object)]"
    )


def test_registry_error_keeps_details() -> None:
    error = RegistryError("bad universe", ["first", "second"])
    assert error.message == "bad universe"
    assert error.errors == ["first", "second"]
    assert str(error) == "bad universe"


def test_type_expression_error() -> None:
    error = TypeExpressionError("Box<", 4, "unexpected end")
    assert error.position == 4
    assert "Box<" in str(error)
