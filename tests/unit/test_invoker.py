"""Unit tests for method invocation."""

import pytest

from refract.core.errors import (
    AmbiguousMethodError,
    InvalidArgumentError,
    InvocationError,
    NoSuchMethodError,
    RegistryError,
)
from refract.reflect.invoker import (
    invoke_exact_method,
    invoke_exact_static_method,
    invoke_method,
    invoke_static_method,
)
from refract.types.registry import TypeRegistry


class HiddenObject:
    """Python stand-in for pkg.Hidden instances."""


class ChildObject:
    """Python stand-in for pkg.Child instances."""


@pytest.fixture
def bound_registry(sample_registry: TypeRegistry) -> TypeRegistry:
    sample_registry.bind_python_type(HiddenObject, "pkg.Hidden")
    sample_registry.bind_python_type(ChildObject, "pkg.Child")

    @sample_registry.implement("pkg.Hidden", "secret")
    def secret(target):
        return "secret"

    @sample_registry.implement("pkg.Hidden", "helper")
    def helper(target):
        return "helper"

    @sample_registry.implement("pkg.Base", "work")
    def base_work(target):
        return "base"

    @sample_registry.implement("pkg.Fmt", "sum", "int[]")
    def total(target, values):
        return sum(values)

    return sample_registry


class TestInvokeMethod:
    """Tests for invoke_method."""

    def test_no_arguments(self, registry: TypeRegistry) -> None:
        assert invoke_method(registry, "abc", "length") == 3

    def test_boxed_argument(self, registry: TypeRegistry) -> None:
        assert invoke_method(registry, "abc", "charAt", 1) == "b"

    def test_exact_overload(self, registry: TypeRegistry) -> None:
        assert invoke_method(registry, 5, "compareTo", 3) == 1

    def test_inherited_from_object(self, registry: TypeRegistry) -> None:
        assert invoke_method(registry, "abc", "equals", "abc") is True

    def test_public_superclass_implementation(self, bound_registry: TypeRegistry) -> None:
        assert invoke_method(bound_registry, HiddenObject(), "work") == "base"

    def test_access_override_on_exact_match(self, bound_registry: TypeRegistry) -> None:
        assert invoke_method(bound_registry, HiddenObject(), "secret") == "secret"

    def test_private_method_needs_force(self, bound_registry: TypeRegistry) -> None:
        with pytest.raises(NoSuchMethodError, match="No such accessible method: helper"):
            invoke_method(bound_registry, HiddenObject(), "helper")
        assert invoke_method(bound_registry, HiddenObject(), "helper", force_access=True) == "helper"

    def test_force_access_not_found(self, bound_registry: TypeRegistry) -> None:
        with pytest.raises(NoSuchMethodError) as exc_info:
            invoke_method(bound_registry, HiddenObject(), "missing", force_access=True)
        assert str(exc_info.value) == "No such method: missing() on object: pkg.Hidden"

    def test_force_access_ambiguity(self, bound_registry: TypeRegistry) -> None:
        with pytest.raises(AmbiguousMethodError):
            invoke_method(bound_registry, ChildObject(), "g", "text", force_access=True)

    def test_not_found_message(self, registry: TypeRegistry) -> None:
        with pytest.raises(NoSuchMethodError) as exc_info:
            invoke_method(registry, "abc", "missing")
        assert str(exc_info.value) == (
            "No such accessible method: missing() on object: java.lang.String"
        )

    def test_missing_implementation(self, bound_registry: TypeRegistry) -> None:
        with pytest.raises(InvocationError):
            invoke_method(bound_registry, ChildObject(), "g", ChildObject())

    def test_explicit_parameter_types(self, registry: TypeRegistry) -> None:
        assert invoke_method(registry, "abc", "charAt", 2, param_types=["int"]) == "c"

    def test_parameter_type_count_mismatch(self, registry: TypeRegistry) -> None:
        with pytest.raises(InvalidArgumentError):
            invoke_method(registry, "abc", "charAt", 2, param_types=[])

    def test_none_target(self, registry: TypeRegistry) -> None:
        with pytest.raises(InvalidArgumentError):
            invoke_method(registry, None, "length")

    def test_unbound_python_type(self, registry: TypeRegistry) -> None:
        with pytest.raises(RegistryError):
            invoke_method(registry, object(), "toString")


class TestInvokeExactMethod:
    def test_boxed_argument_is_not_unboxed(self, registry: TypeRegistry) -> None:
        with pytest.raises(NoSuchMethodError):
            invoke_exact_method(registry, "abc", "charAt", 1)

    def test_explicit_parameter_types(self, registry: TypeRegistry) -> None:
        assert invoke_exact_method(registry, "abc", "charAt", 1, param_types=["int"]) == "b"


class TestInvokeStaticMethod:
    """Tests for the static invokers."""

    def test_varargs_are_packed(self, registry: TypeRegistry) -> None:
        assert invoke_static_method(registry, "java.lang.String", "format", "%s-%s", "a", "b") == "a-b"

    def test_varargs_with_array(self, registry: TypeRegistry) -> None:
        args = registry.new_array("Object", ["x"])
        assert invoke_static_method(registry, "String", "format", "<%s>", args) == "<x>"

    def test_varargs_veto(self, registry: TypeRegistry) -> None:
        # Integer's immediate superclass is Number, so format(String, Object...) is rejected.
        with pytest.raises(NoSuchMethodError) as exc_info:
            invoke_static_method(registry, "String", "format", "%d", 5)
        assert str(exc_info.value) == (
            "No such accessible method: format() on class: java.lang.String"
        )

    def test_primitive_varargs(self, bound_registry: TypeRegistry) -> None:
        assert invoke_static_method(bound_registry, "pkg.Fmt", "sum", 1, 2, 3) == 6

    def test_unboxing(self, registry: TypeRegistry) -> None:
        assert invoke_static_method(registry, "Integer", "valueOf", 5) == 5

    def test_instance_method(self, registry: TypeRegistry) -> None:
        with pytest.raises(InvocationError):
            invoke_static_method(registry, "String", "length")

    def test_descriptor_owner(self, registry: TypeRegistry) -> None:
        owner = registry.get("Integer")
        assert invoke_static_method(registry, owner, "valueOf", 7) == 7

    def test_none_owner(self, registry: TypeRegistry) -> None:
        with pytest.raises(InvalidArgumentError):
            invoke_static_method(registry, None, "valueOf", 1)

    def test_exact(self, registry: TypeRegistry) -> None:
        with pytest.raises(NoSuchMethodError):
            invoke_exact_static_method(registry, "Integer", "valueOf", 5)
        assert invoke_exact_static_method(registry, "Integer", "valueOf", 5, param_types=["int"]) == 5
