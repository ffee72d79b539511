"""Type and method descriptors.

``TypeDescriptor`` is the capability interface the resolver works against: any
host that can answer these queries can be resolved over. ``ClassDescriptor``
is the in-memory implementation built by ``TypeRegistry``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from typing import Any, Protocol

from refract.core.models import AnnotationDef, TypeKind, Visibility
from refract.types.generics import ClassRef, GenericType, TypeVariable


class TypeDescriptor(Protocol):
    """Read-only view of one type in the host's type system."""

    name: str
    kind: TypeKind
    visibility: Visibility
    superclass: TypeDescriptor | None
    interfaces: tuple[TypeDescriptor, ...]
    component_type: TypeDescriptor | None
    wrapper: TypeDescriptor | None
    primitive: TypeDescriptor | None
    type_parameters: tuple[TypeVariable, ...]
    generic_superclass: GenericType | None
    generic_interfaces: tuple[GenericType, ...]

    @property
    def simple_name(self) -> str: ...

    @property
    def is_public(self) -> bool: ...

    @property
    def is_primitive(self) -> bool: ...

    @property
    def is_interface(self) -> bool: ...

    @property
    def is_array(self) -> bool: ...

    def declared_methods(self) -> tuple[MethodDescriptor, ...]: ...


class ClassDescriptor:
    """In-memory type descriptor.

    Instances are compared and hashed by identity; a registry holds exactly one
    descriptor per type name.
    """

    def __init__(
        self,
        name: str,
        kind: TypeKind = TypeKind.CLASS,
        visibility: Visibility = Visibility.PUBLIC,
        type_parameters: Sequence[TypeVariable] = (),
        component_type: ClassDescriptor | None = None,
    ) -> None:
        self.name = name
        self.kind = kind
        self.visibility = visibility
        self.type_parameters = tuple(type_parameters)
        self.type_parameter_bounds: dict[TypeVariable, tuple[GenericType, ...]] = {}
        self.component_type = component_type
        self.superclass: ClassDescriptor | None = None
        self.interfaces: tuple[ClassDescriptor, ...] = ()
        self.generic_superclass: GenericType | None = None
        self.generic_interfaces: tuple[GenericType, ...] = ()
        self.wrapper: ClassDescriptor | None = None
        self.primitive: ClassDescriptor | None = None
        self._methods: list[MethodDescriptor] = []

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    @property
    def is_public(self) -> bool:
        return self.visibility is Visibility.PUBLIC

    @property
    def is_primitive(self) -> bool:
        return self.kind is TypeKind.PRIMITIVE

    @property
    def is_interface(self) -> bool:
        return self.kind is TypeKind.INTERFACE

    @property
    def is_array(self) -> bool:
        return self.kind is TypeKind.ARRAY

    def declared_methods(self) -> tuple[MethodDescriptor, ...]:
        return tuple(self._methods)

    def add_method(self, method: MethodDescriptor) -> None:
        if method.declaring_type is not self:
            raise ValueError(f"{method.name} is declared on {method.declaring_type.name}, not {self.name}")
        self._methods.append(method)

    def __repr__(self) -> str:
        return f"<{self.kind.value.lower()} {self.name}>"

    def __str__(self) -> str:
        return self.name


class MethodDescriptor:
    """One concrete method declaration.

    Args:
        declaring_type: Type that declares the method.
        name: Simple method name.
        parameter_types: Erased parameter types.
        generic_parameter_types: Parameter types as written, with type variables.
        is_varargs: Whether the last parameter is variadic.
        visibility: Declared access modifier.
        is_static: Whether the method is static.
        annotations: Markers attached directly to this declaration.
        return_type: Return type expression, informational only.
        implementation: Python callable invoked with ``(target, *args)``.
    """

    def __init__(
        self,
        declaring_type: ClassDescriptor,
        name: str,
        parameter_types: Sequence[ClassDescriptor] = (),
        generic_parameter_types: Sequence[GenericType] | None = None,
        *,
        is_varargs: bool = False,
        visibility: Visibility = Visibility.PUBLIC,
        is_static: bool = False,
        annotations: Sequence[AnnotationDef] = (),
        return_type: str | None = None,
        implementation: Callable[..., Any] | None = None,
    ) -> None:
        self.declaring_type = declaring_type
        self.name = name
        self.parameter_types = tuple(parameter_types)
        if generic_parameter_types is None:
            generic_parameter_types = [ClassRef(p.name) for p in self.parameter_types]
        self.generic_parameter_types = tuple(generic_parameter_types)
        if len(self.generic_parameter_types) != len(self.parameter_types):
            raise ValueError("generic and erased parameter lists differ in length")
        if is_varargs and (not self.parameter_types or not self.parameter_types[-1].is_array):
            raise ValueError(f"varargs method {name} must end with an array parameter")
        self.is_varargs = is_varargs
        self.visibility = visibility
        self.is_static = is_static
        self.annotations = tuple(annotations)
        self.return_type = return_type
        self.implementation = implementation

    @property
    def is_public(self) -> bool:
        return self.visibility is Visibility.PUBLIC

    @property
    def signature_text(self) -> str:
        """Fully-qualified rendering used as the deterministic sort key."""
        modifiers = []
        if self.visibility is not Visibility.PACKAGE:
            modifiers.append(self.visibility.value)
        if self.is_static:
            modifiers.append("static")
        modifiers.append(self.return_type or "void")
        params = ",".join(p.name for p in self.parameter_types)
        return f"{' '.join(modifiers)} {self.declaring_type.name}.{self.name}({params})"

    def get_annotation(self, marker: str) -> AnnotationDef | None:
        """Return the annotation named ``marker`` attached to this declaration."""
        for annotation in self.annotations:
            if annotation.name == marker:
                return annotation
        return None

    def has_annotation(self, marker: str) -> bool:
        return self.get_annotation(marker) is not None

    def __repr__(self) -> str:
        return f"<method {self.signature_text}>"


class TypedArray:
    """Runtime array value: a tuple of items tagged with its array type."""

    __slots__ = ("array_type", "items")

    def __init__(self, array_type: ClassDescriptor, items: Sequence[Any] = ()) -> None:
        if not array_type.is_array:
            raise ValueError(f"{array_type.name} is not an array type")
        self.array_type = array_type
        self.items = tuple(items)

    @property
    def component_type(self) -> ClassDescriptor:
        assert self.array_type.component_type is not None
        return self.array_type.component_type

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Any:
        return self.items[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypedArray):
            return NotImplemented
        return self.array_type is other.array_type and self.items == other.items

    def __hash__(self) -> int:
        return hash((id(self.array_type), self.items))

    def __repr__(self) -> str:
        return f"{self.array_type.name}{list(self.items)!r}"
