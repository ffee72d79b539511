"""In-memory type registry.

A TypeRegistry turns declarative ``Universe`` models into linked
``ClassDescriptor``/``MethodDescriptor`` graphs. Loading uses two phases:

- Phase 1 (definition scanning): validate the universe and create one
  descriptor per type, so forward references can be resolved.
- Phase 2 (reference resolution): parse supertypes and method parameters,
  link erased supertypes and build method descriptors.

The registry also provides the built-in Java-style types (primitives, their
wrappers and a few ``java.lang`` reference types) and maps Python runtime
values to descriptors for invocation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from typing import Any, TypeVar

from refract.core.errors import RegistryError
from refract.core.models import AnnotationDef, MethodDef, TypeDef, TypeKind, Universe, Visibility
from refract.core.validator import KnownType, ValidationResult, validate_universe
from refract.types.descriptors import ClassDescriptor, MethodDescriptor, TypedArray
from refract.types.generics import (
    OBJECT_NAME,
    ClassRef,
    GenericType,
    TypeExpressionParser,
    TypeVariable,
    erase,
    raw_name,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

SERIALIZABLE_NAME = "java.io.Serializable"
CLONEABLE_NAME = "java.lang.Cloneable"

# primitive -> wrapper
PRIMITIVE_WRAPPERS: dict[str, str] = {
    "boolean": "java.lang.Boolean",
    "byte": "java.lang.Byte",
    "char": "java.lang.Character",
    "short": "java.lang.Short",
    "int": "java.lang.Integer",
    "long": "java.lang.Long",
    "float": "java.lang.Float",
    "double": "java.lang.Double",
}

_NUMERIC_WRAPPERS = ("Byte", "Short", "Integer", "Long", "Float", "Double")


def _compare(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


def _builtin_universe() -> Universe:
    """Reference types every registry starts with."""
    object_methods = [
        MethodDef(name="equals", parameters=["java.lang.Object"], return_type="boolean"),
        MethodDef(name="hashCode", return_type="int"),
        MethodDef(name="toString", return_type="java.lang.String"),
    ]
    universe = Universe()
    universe.add(TypeDef(qualified_name=OBJECT_NAME, methods=object_methods))
    universe.add(TypeDef(qualified_name=SERIALIZABLE_NAME, kind=TypeKind.INTERFACE))
    universe.add(TypeDef(qualified_name=CLONEABLE_NAME, kind=TypeKind.INTERFACE))
    universe.add(
        TypeDef(
            qualified_name="java.lang.Comparable",
            kind=TypeKind.INTERFACE,
            type_parameters=["T"],
            methods=[MethodDef(name="compareTo", parameters=["T"], return_type="int")],
        )
    )
    universe.add(
        TypeDef(
            qualified_name="java.lang.CharSequence",
            kind=TypeKind.INTERFACE,
            methods=[
                MethodDef(name="length", return_type="int"),
                MethodDef(name="charAt", parameters=["int"], return_type="char"),
            ],
        )
    )
    universe.add(
        TypeDef(
            qualified_name="java.lang.String",
            interfaces=[
                SERIALIZABLE_NAME,
                "java.lang.Comparable<java.lang.String>",
                "java.lang.CharSequence",
            ],
            methods=[
                MethodDef(name="length", return_type="int"),
                MethodDef(name="charAt", parameters=["int"], return_type="char"),
                MethodDef(
                    name="compareTo", parameters=["java.lang.String"], return_type="int"
                ),
                MethodDef(
                    name="format",
                    parameters=["java.lang.String", "java.lang.Object[]"],
                    varargs=True,
                    is_static=True,
                    return_type="java.lang.String",
                ),
            ],
        )
    )
    universe.add(
        TypeDef(
            qualified_name="java.lang.Number",
            interfaces=[SERIALIZABLE_NAME],
            methods=[
                MethodDef(name="intValue", return_type="int"),
                MethodDef(name="doubleValue", return_type="double"),
            ],
        )
    )
    for primitive, wrapper in PRIMITIVE_WRAPPERS.items():
        numeric = wrapper.rsplit(".", 1)[-1] in _NUMERIC_WRAPPERS
        universe.add(
            TypeDef(
                qualified_name=wrapper,
                superclass="java.lang.Number" if numeric else None,
                interfaces=[SERIALIZABLE_NAME, f"java.lang.Comparable<{wrapper}>"],
                methods=[
                    MethodDef(name="compareTo", parameters=[wrapper], return_type="int"),
                    MethodDef(
                        name="valueOf",
                        parameters=[primitive],
                        is_static=True,
                        return_type=wrapper,
                    ),
                ],
            )
        )
    return universe


class TypeRegistry:
    """Registry of type descriptors.

    Args:
        builtins: Preload the built-in types. Defaults to the configured value.
    """

    def __init__(self, builtins: bool | None = None) -> None:
        if builtins is None:
            from refract.core.config import get_config

            builtins = get_config().builtin_types
        self._types: dict[str, ClassDescriptor] = {}
        self._aliases: dict[str, str] = {}
        self._python_types: dict[type, str] = {}
        self._arrays: dict[int, ClassDescriptor] = {}
        if builtins:
            self._load_builtins()

    @classmethod
    def from_universe(cls, universe: Universe, builtins: bool | None = None) -> TypeRegistry:
        """Create a registry and load ``universe`` into it."""
        registry = cls(builtins=builtins)
        registry.load(universe)
        return registry

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find(name) is not None

    def __iter__(self) -> Iterator[ClassDescriptor]:
        return iter(list(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)

    def canonical_name(self, name: str) -> str:
        """Resolve a short alias such as ``String`` to its qualified name."""
        return self._aliases.get(name, name)

    def find(self, name: str) -> ClassDescriptor | None:
        """Look up a type by name; ``[]`` suffixes denote array types."""
        name = name.strip()
        if name.endswith("[]"):
            component = self.find(name[:-2])
            return None if component is None else self.array_of(component)
        return self._types.get(self.canonical_name(name))

    def get(self, name: str) -> ClassDescriptor:
        """Look up a type by name.

        Raises:
            RegistryError: If the type is unknown.
        """
        found = self.find(name)
        if found is None:
            raise RegistryError(f"Unknown type: {name}")
        return found

    def array_of(self, component: ClassDescriptor) -> ClassDescriptor:
        """Return the (cached) array type whose elements are ``component``."""
        cached = self._arrays.get(id(component))
        if cached is not None:
            return cached
        array = ClassDescriptor(
            f"{component.name}[]",
            kind=TypeKind.ARRAY,
            visibility=component.visibility,
            component_type=component,
        )
        array.superclass = self._types.get(OBJECT_NAME)
        array.interfaces = tuple(
            t for t in (self._types.get(CLONEABLE_NAME), self._types.get(SERIALIZABLE_NAME)) if t
        )
        if array.superclass is not None:
            array.generic_superclass = ClassRef(OBJECT_NAME)
        array.generic_interfaces = tuple(ClassRef(t.name) for t in array.interfaces)
        self._arrays[id(component)] = array
        return array

    def new_array(self, component: ClassDescriptor | str, items: Sequence[Any] = ()) -> TypedArray:
        """Create a runtime array value of ``component`` elements."""
        if isinstance(component, str):
            component = self.get(component)
        return TypedArray(self.array_of(component), items)

    def method(self, type_name: str, method_name: str, *parameter_types: str) -> MethodDescriptor:
        """Return the method declared on ``type_name`` with exactly these parameters.

        Raises:
            RegistryError: If no such declaration exists.
        """
        owner = self.get(type_name)
        wanted = tuple(self.get(p) for p in parameter_types)
        for method in owner.declared_methods():
            if method.name == method_name and method.parameter_types == wanted:
                return method
        params = ",".join(parameter_types)
        raise RegistryError(f"No method {method_name}({params}) declared on {owner.name}")

    # ------------------------------------------------------------------
    # Runtime values
    # ------------------------------------------------------------------

    def bind_python_type(self, py_type: type, type_name: str) -> None:
        """Map instances of ``py_type`` (and its subclasses) to ``type_name``."""
        self._python_types[py_type] = self.get(type_name).name

    def type_of(self, value: Any) -> ClassDescriptor | None:
        """Runtime type of a Python value; ``None`` (null) has no type.

        Raises:
            RegistryError: If no descriptor is bound to the value's Python type.
        """
        if value is None:
            return None
        if isinstance(value, TypedArray):
            return value.array_type
        for klass in type(value).__mro__:
            name = self._python_types.get(klass)
            if name is not None:
                return self._types[name]
        raise RegistryError(f"No type bound to Python type {type(value).__qualname__}")

    def types_of(self, values: Sequence[Any]) -> tuple[ClassDescriptor | None, ...]:
        return tuple(self.type_of(v) for v in values)

    def implement(self, type_name: str, method_name: str, *parameter_types: str) -> Callable[[F], F]:
        """Decorator attaching a Python implementation to a declared method.

        The implementation is called as ``fn(target, *args)``; ``target`` is
        ``None`` for static methods.
        """
        method = self.method(type_name, method_name, *parameter_types)

        def decorator(fn: F) -> F:
            method.implementation = fn
            return fn

        return decorator

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def validate(self, universe: Universe) -> ValidationResult:
        """Validate ``universe`` against the types already registered."""
        known = {
            name: KnownType(d.kind, len(d.type_parameters)) for name, d in self._types.items()
        }
        return validate_universe(universe, known=known, resolve=self.canonical_name)

    def load(self, universe: Universe) -> list[ClassDescriptor]:
        """Load every type of ``universe``.

        Returns:
            The newly created descriptors, in universe order.

        Raises:
            RegistryError: If the universe is invalid or redefines a known type.
        """
        clashes = sorted(name for name in universe.types if name in self._types)
        if clashes:
            raise RegistryError(f"Types already registered: {', '.join(clashes)}")

        result = self.validate(universe)
        if not result.is_valid:
            summary = "; ".join(e.message for e in result.errors[:5])
            raise RegistryError(f"Invalid universe: {summary}", result.errors)

        # Phase 1: one descriptor per type
        created: list[tuple[TypeDef, ClassDescriptor]] = []
        for type_def in universe.types.values():
            variables = [
                TypeVariable(p.split(" ", 1)[0].strip(), type_def.qualified_name)
                for p in type_def.type_parameters
            ]
            descriptor = ClassDescriptor(
                type_def.qualified_name,
                kind=type_def.kind,
                visibility=type_def.visibility,
                type_parameters=variables,
            )
            self._types[descriptor.name] = descriptor
            created.append((type_def, descriptor))

        # Phase 2: supertypes, then methods
        for type_def, descriptor in created:
            self._link_supertypes(type_def, descriptor)
        for type_def, descriptor in created:
            parser = self._parser_for(descriptor)
            for method_def in type_def.methods:
                descriptor.add_method(self._build_method(descriptor, method_def, parser))

        logger.debug("Loaded %d types into registry", len(created))
        return [d for _, d in created]

    def _parser_for(self, descriptor: ClassDescriptor) -> TypeExpressionParser:
        variables = {v.name: descriptor.name for v in descriptor.type_parameters}
        return TypeExpressionParser(variables, self.canonical_name)

    def _link_supertypes(self, type_def: TypeDef, descriptor: ClassDescriptor) -> None:
        parser = self._parser_for(descriptor)
        for declaration in type_def.type_parameters:
            name, bounds = parser.parse_parameter(declaration)
            descriptor.type_parameter_bounds[TypeVariable(name, descriptor.name)] = bounds

        if type_def.superclass is not None:
            shape = parser.parse(type_def.superclass)
            descriptor.generic_superclass = shape
            descriptor.superclass = self._erased(shape, descriptor)
        elif type_def.kind is TypeKind.CLASS and descriptor.name != OBJECT_NAME:
            descriptor.generic_superclass = ClassRef(OBJECT_NAME)
            descriptor.superclass = self._types.get(OBJECT_NAME)

        shapes = tuple(parser.parse(expression) for expression in type_def.interfaces)
        descriptor.generic_interfaces = shapes
        descriptor.interfaces = tuple(self._erased(s, descriptor) for s in shapes)

    def _erased(self, shape: GenericType, owner: ClassDescriptor) -> ClassDescriptor:
        name = raw_name(shape) or erase(shape, owner.type_parameter_bounds)
        return self.get(name)

    def _build_method(
        self, owner: ClassDescriptor, method_def: MethodDef, parser: TypeExpressionParser
    ) -> MethodDescriptor:
        shapes = [parser.parse(p) for p in method_def.parameters]
        erased = [self.get(erase(s, owner.type_parameter_bounds)) for s in shapes]
        return MethodDescriptor(
            owner,
            method_def.name,
            erased,
            shapes,
            is_varargs=method_def.varargs,
            visibility=method_def.visibility,
            is_static=method_def.is_static,
            annotations=[AnnotationDef.model_validate(a.model_dump()) for a in method_def.annotations],
            return_type=method_def.return_type,
        )

    def _load_builtins(self) -> None:
        for primitive in PRIMITIVE_WRAPPERS:
            self._types[primitive] = ClassDescriptor(primitive, kind=TypeKind.PRIMITIVE)
        self.load(_builtin_universe())

        for primitive, wrapper in PRIMITIVE_WRAPPERS.items():
            self._types[primitive].wrapper = self._types[wrapper]
            self._types[wrapper].primitive = self._types[primitive]

        for name in list(self._types):
            if name.startswith("java.lang.") and name.count(".") == 2:
                self._aliases[name.rsplit(".", 1)[-1]] = name
        self._aliases["Serializable"] = SERIALIZABLE_NAME

        self._python_types.update(
            {
                bool: "java.lang.Boolean",
                int: "java.lang.Integer",
                float: "java.lang.Double",
                str: "java.lang.String",
            }
        )
        self._implement_builtins()

    def _implement_builtins(self) -> None:
        self.method(OBJECT_NAME, "equals", OBJECT_NAME).implementation = lambda s, o: s == o
        self.method(OBJECT_NAME, "hashCode").implementation = lambda s: hash(s)
        self.method(OBJECT_NAME, "toString").implementation = lambda s: str(s)
        for owner in ("java.lang.String", "java.lang.CharSequence"):
            self.method(owner, "length").implementation = lambda s: len(s)
            self.method(owner, "charAt", "int").implementation = lambda s, i: s[i]
        self.method("java.lang.String", "compareTo", "java.lang.String").implementation = _compare
        self.method("java.lang.Comparable", "compareTo", OBJECT_NAME).implementation = _compare
        self.method(
            "java.lang.String", "format", "java.lang.String", "java.lang.Object[]"
        ).implementation = lambda _, fmt, args: fmt % tuple(args)
        self.method("java.lang.Number", "intValue").implementation = lambda s: int(s)
        self.method("java.lang.Number", "doubleValue").implementation = lambda s: float(s)
        for primitive, wrapper in PRIMITIVE_WRAPPERS.items():
            self.method(wrapper, "compareTo", wrapper).implementation = _compare
            self.method(wrapper, "valueOf", primitive).implementation = lambda _, v: v
