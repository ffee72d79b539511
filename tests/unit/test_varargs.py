"""Unit tests for variadic argument packing."""

import pytest

from refract.core.errors import InvalidArgumentError
from refract.reflect.varargs import canonicalize, is_canonical, to_varargs
from refract.types.descriptors import TypedArray
from refract.types.registry import TypeRegistry


@pytest.fixture
def join_formals(registry: TypeRegistry):
    return (registry.get("String"), registry.get("Object[]"))


class TestCanonicalize:
    """Tests for canonicalize."""

    def test_packs_trailing_arguments(self, registry: TypeRegistry, join_formals) -> None:
        packed = canonicalize(join_formals, ["%s-%s", "a", "b"])

        assert len(packed) == 2
        assert packed[0] == "%s-%s"
        assert isinstance(packed[1], TypedArray)
        assert packed[1].array_type is registry.get("Object[]")
        assert list(packed[1]) == ["a", "b"]

    def test_zero_trailing_arguments(self, registry: TypeRegistry, join_formals) -> None:
        packed = canonicalize(join_formals, ["x"])
        assert packed[1] == registry.new_array("Object")

    def test_canonical_input_is_returned_unchanged(self, registry: TypeRegistry, join_formals) -> None:
        args = ["x", registry.new_array("Object", ["a"])]
        assert canonicalize(join_formals, args) is args

    def test_null_array_is_canonical(self, join_formals) -> None:
        args = ["x", None]
        assert canonicalize(join_formals, args) is args

    def test_single_value_of_other_array_type_is_packed(self, registry: TypeRegistry, join_formals) -> None:
        strings = registry.new_array("String", ["a"])
        packed = canonicalize(join_formals, ["x", strings])
        assert packed[1].array_type is registry.get("Object[]")
        assert packed[1][0] is strings

    def test_primitive_component_unboxes(self, registry: TypeRegistry) -> None:
        packed = canonicalize([registry.get("int[]")], [1, 2, True])
        assert packed[0].array_type is registry.get("int[]")
        assert list(packed[0]) == [1, 2, 1]

    def test_char_component(self, registry: TypeRegistry) -> None:
        packed = canonicalize([registry.get("char[]")], ["a", 98])
        assert list(packed[0]) == ["a", "b"]

    def test_double_component(self, registry: TypeRegistry) -> None:
        packed = canonicalize([registry.get("double[]")], [1, 2.5])
        assert list(packed[0]) == [1.0, 2.5]
        assert all(isinstance(v, float) for v in packed[0])

    def test_null_in_primitive_array(self, registry: TypeRegistry) -> None:
        with pytest.raises(InvalidArgumentError):
            canonicalize([registry.get("int[]")], [1, None])

    def test_bad_char(self, registry: TypeRegistry) -> None:
        with pytest.raises(InvalidArgumentError):
            canonicalize([registry.get("char[]")], ["ab"])

    def test_char_code_out_of_range(self, registry: TypeRegistry) -> None:
        with pytest.raises(InvalidArgumentError):
            canonicalize([registry.get("char[]")], [0x110000])
        with pytest.raises(InvalidArgumentError):
            canonicalize([registry.get("char[]")], [-1])

    def test_no_formals(self) -> None:
        with pytest.raises(InvalidArgumentError):
            canonicalize([], ["a"])

    def test_last_formal_not_array(self, registry: TypeRegistry) -> None:
        with pytest.raises(InvalidArgumentError):
            canonicalize([registry.get("String")], ["a"])

    def test_too_few_arguments(self, join_formals) -> None:
        with pytest.raises(InvalidArgumentError):
            canonicalize(join_formals, [])


class TestIsCanonical:
    def test_length_mismatch(self, join_formals) -> None:
        assert not is_canonical(join_formals, ["x"])

    def test_wrong_array_type(self, registry: TypeRegistry, join_formals) -> None:
        assert not is_canonical(join_formals, ["x", registry.new_array("String")])


class TestToVarargs:
    def test_non_variadic_method_is_untouched(self, registry: TypeRegistry) -> None:
        method = registry.method("String", "charAt", "int")
        args = [1]
        assert to_varargs(method, args) is args

    def test_variadic_method(self, registry: TypeRegistry) -> None:
        method = registry.method("String", "format", "String", "Object[]")
        packed = to_varargs(method, ["%s", "a"])
        assert list(packed[1]) == ["a"]
