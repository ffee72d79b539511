"""Unit tests for type compatibility and hierarchy enumeration."""

import pytest

from refract.types.compat import (
    all_interfaces,
    all_superclasses,
    all_superclasses_and_interfaces,
    hierarchy,
    is_assignable,
    is_assignable_all,
    is_subtype,
    primitive_to_wrapper,
    type_arguments,
    wrapper_to_primitive,
)
from refract.types.generics import ClassRef, TypeVariable
from refract.types.registry import TypeRegistry


def names(types) -> list[str]:
    return [t.name for t in types]


class TestAssignability:
    """Strict and loose assignability."""

    @pytest.mark.parametrize(
        ("source", "target"),
        [
            ("byte", "short"),
            ("byte", "double"),
            ("char", "int"),
            ("short", "long"),
            ("int", "float"),
            ("long", "double"),
            ("float", "double"),
        ],
    )
    def test_primitive_widening(self, registry: TypeRegistry, source: str, target: str) -> None:
        assert is_assignable(registry.get(source), registry.get(target), autoboxing=False)

    @pytest.mark.parametrize(
        ("source", "target"),
        [("int", "short"), ("char", "short"), ("double", "float"), ("boolean", "int")],
    )
    def test_no_narrowing(self, registry: TypeRegistry, source: str, target: str) -> None:
        assert not is_assignable(registry.get(source), registry.get(target))

    def test_boxing_requires_loose_mode(self, registry: TypeRegistry) -> None:
        int_type, integer = registry.get("int"), registry.get("Integer")
        assert is_assignable(int_type, integer)
        assert is_assignable(integer, int_type)
        assert not is_assignable(int_type, integer, autoboxing=False)
        assert not is_assignable(integer, int_type, autoboxing=False)

    def test_boxing_then_subtyping(self, registry: TypeRegistry) -> None:
        assert is_assignable(registry.get("int"), registry.get("Number"))
        assert is_assignable(registry.get("int"), registry.get("Object"))
        assert not is_assignable(registry.get("int"), registry.get("String"))

    def test_unboxing_then_widening(self, registry: TypeRegistry) -> None:
        assert is_assignable(registry.get("Integer"), registry.get("long"))
        assert not is_assignable(registry.get("Long"), registry.get("int"))

    def test_null(self, registry: TypeRegistry) -> None:
        assert is_assignable(None, registry.get("String"))
        assert is_assignable(None, registry.get("int[]"))
        assert not is_assignable(None, registry.get("int"))

    def test_reference_subtyping(self, registry: TypeRegistry) -> None:
        string = registry.get("String")
        assert is_assignable(string, registry.get("CharSequence"), autoboxing=False)
        assert is_assignable(string, registry.get("Comparable"), autoboxing=False)
        assert is_assignable(string, registry.get("Object"), autoboxing=False)
        assert not is_assignable(registry.get("Object"), string)

    def test_arrays(self, registry: TypeRegistry) -> None:
        strings = registry.get("String[]")
        assert is_assignable(strings, registry.get("Object[]"))
        assert is_assignable(strings, registry.get("Object"))
        assert is_assignable(strings, registry.get("Cloneable"))
        assert is_assignable(strings, registry.get("Serializable"))
        assert not is_assignable(registry.get("int[]"), registry.get("Object[]"))
        assert not is_assignable(registry.get("int[]"), registry.get("long[]"))

    def test_is_subtype_is_reflexive(self, registry: TypeRegistry) -> None:
        assert is_subtype(registry.get("int"), registry.get("int"))
        assert not is_subtype(registry.get("int"), registry.get("long"))

    def test_is_assignable_all(self, registry: TypeRegistry) -> None:
        string, obj = registry.get("String"), registry.get("Object")
        assert is_assignable_all([string, None], [obj, string])
        assert not is_assignable_all([string], [obj, obj])
        assert is_assignable_all([], [])

    def test_wrapper_conversion(self, registry: TypeRegistry) -> None:
        assert primitive_to_wrapper(registry.get("char")) is registry.get("Character")
        assert primitive_to_wrapper(registry.get("String")) is registry.get("String")
        assert wrapper_to_primitive(registry.get("Boolean")) is registry.get("boolean")
        assert wrapper_to_primitive(registry.get("String")) is None
        assert primitive_to_wrapper(None) is None


class TestHierarchy:
    """Superclass and interface enumeration."""

    def test_all_superclasses(self, registry: TypeRegistry) -> None:
        assert names(all_superclasses(registry.get("Integer"))) == [
            "java.lang.Number",
            "java.lang.Object",
        ]
        assert all_superclasses(registry.get("Object")) == []

    def test_all_interfaces(self, registry: TypeRegistry) -> None:
        assert names(all_interfaces(registry.get("Integer"))) == [
            "java.io.Serializable",
            "java.lang.Comparable",
        ]

    def test_hierarchy_without_interfaces(self, registry: TypeRegistry) -> None:
        assert names(hierarchy(registry.get("Integer"))) == [
            "java.lang.Integer",
            "java.lang.Number",
            "java.lang.Object",
        ]

    def test_hierarchy_with_interfaces(self, registry: TypeRegistry) -> None:
        assert names(hierarchy(registry.get("Integer"), include_interfaces=True)) == [
            "java.lang.Integer",
            "java.io.Serializable",
            "java.lang.Comparable",
            "java.lang.Number",
            "java.lang.Object",
        ]

    def test_interleaved_order(self, registry: TypeRegistry) -> None:
        assert names(all_superclasses_and_interfaces(registry.get("Integer"))) == [
            "java.io.Serializable",
            "java.lang.Number",
            "java.lang.Comparable",
            "java.lang.Object",
        ]

    def test_interleaved_order_of_interface(self, sample_registry: TypeRegistry) -> None:
        assert all_superclasses_and_interfaces(sample_registry.get("pkg.Api")) == []


class TestTypeArguments:
    """Bindings collected along the path to an ancestor."""

    def test_direct_binding(self, sample_registry: TypeRegistry) -> None:
        bindings = type_arguments(sample_registry.get("pkg.StringBox"), sample_registry.get("pkg.Box"))
        assert bindings == {TypeVariable("T", "pkg.Box"): ClassRef("java.lang.String")}

    def test_interface_binding(self, sample_registry: TypeRegistry) -> None:
        bindings = type_arguments(
            sample_registry.get("pkg.StringBox"), sample_registry.get("pkg.Source")
        )
        assert bindings == {TypeVariable("T", "pkg.Source"): ClassRef("java.lang.String")}

    def test_same_type(self, sample_registry: TypeRegistry) -> None:
        box = sample_registry.get("pkg.Box")
        assert type_arguments(box, box) == {}

    def test_unrelated(self, sample_registry: TypeRegistry) -> None:
        assert type_arguments(sample_registry.get("pkg.Box"), sample_registry.get("String")) is None
