"""Type compatibility and hierarchy primitives.

Two assignability modes are supported:

- strict: identity, primitive widening, or reference subtyping
- loose: strict plus boxing/unboxing between primitives and their wrappers

``None`` in a type position stands for the null type, which is assignable to
every reference type.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator, Sequence

from refract.types.descriptors import TypeDescriptor
from refract.types.generics import OBJECT_NAME, GenericType, ParameterizedType, TypeVariable

# Primitive widening conversions (JLS 5.1.2)
_WIDENING: dict[str, frozenset[str]] = {
    "byte": frozenset({"short", "int", "long", "float", "double"}),
    "short": frozenset({"int", "long", "float", "double"}),
    "char": frozenset({"int", "long", "float", "double"}),
    "int": frozenset({"long", "float", "double"}),
    "long": frozenset({"float", "double"}),
    "float": frozenset({"double"}),
}


def primitive_to_wrapper(cls: TypeDescriptor | None) -> TypeDescriptor | None:
    """Return the wrapper of a primitive type, or the type itself otherwise."""
    if cls is not None and cls.is_primitive:
        return cls.wrapper
    return cls


def wrapper_to_primitive(cls: TypeDescriptor | None) -> TypeDescriptor | None:
    """Return the primitive of a wrapper type, or ``None`` if it is not a wrapper."""
    if cls is None:
        return None
    return cls.primitive


def is_subtype(cls: TypeDescriptor, to: TypeDescriptor) -> bool:
    """Reflexive reference subtyping, including array covariance."""
    if cls is to:
        return True
    if cls.is_primitive or to.is_primitive:
        return False
    if to.name == OBJECT_NAME:
        return True
    if cls.is_array and to.is_array:
        source, target = cls.component_type, to.component_type
        if source is None or target is None:
            return False
        if source.is_primitive or target.is_primitive:
            return source is target
        return is_subtype(source, target)

    seen: set[int] = set()
    queue: deque[TypeDescriptor] = deque([cls])
    while queue:
        current = queue.popleft()
        if current is to:
            return True
        if id(current) in seen:
            continue
        seen.add(id(current))
        if current.superclass is not None:
            queue.append(current.superclass)
        queue.extend(current.interfaces)
    return False


def is_assignable(
    cls: TypeDescriptor | None, to: TypeDescriptor | None, autoboxing: bool = True
) -> bool:
    """Check whether a value of type ``cls`` can be supplied where ``to`` is declared.

    Args:
        cls: Source type; ``None`` is the null type.
        to: Declared target type.
        autoboxing: Allow primitive/wrapper conversions (loose mode).

    Returns:
        True if assignable under the requested mode.
    """
    if to is None:
        return False
    if cls is None:
        return not to.is_primitive

    if autoboxing:
        if cls.is_primitive and not to.is_primitive:
            cls = primitive_to_wrapper(cls)
            if cls is None:
                return False
        if to.is_primitive and not cls.is_primitive:
            cls = wrapper_to_primitive(cls)
            if cls is None:
                return False

    if cls is to:
        return True
    if cls.is_primitive:
        if not to.is_primitive:
            return False
        return to.name in _WIDENING.get(cls.name, frozenset())
    return is_subtype(cls, to)


def is_assignable_all(
    classes: Sequence[TypeDescriptor | None],
    to_classes: Sequence[TypeDescriptor],
    autoboxing: bool = True,
) -> bool:
    """Element-wise ``is_assignable``; sequences of different length never match."""
    if len(classes) != len(to_classes):
        return False
    return all(is_assignable(c, t, autoboxing) for c, t in zip(classes, to_classes))


def all_superclasses(cls: TypeDescriptor) -> list[TypeDescriptor]:
    """Superclass chain of ``cls``, nearest first, excluding ``cls`` itself."""
    result: list[TypeDescriptor] = []
    current = cls.superclass
    while current is not None:
        result.append(current)
        current = current.superclass
    return result


def all_interfaces(cls: TypeDescriptor) -> list[TypeDescriptor]:
    """Every interface implemented by ``cls`` or its superclasses.

    Order: for each class of the superclass chain, its interfaces in declaration
    order, each followed depth-first by its own superinterfaces. No duplicates.
    """
    found: list[TypeDescriptor] = []
    seen: set[int] = set()

    def walk(interfaces: Sequence[TypeDescriptor]) -> None:
        for iface in interfaces:
            if id(iface) in seen:
                continue
            seen.add(id(iface))
            found.append(iface)
            walk(iface.interfaces)

    current: TypeDescriptor | None = cls
    while current is not None:
        walk(current.interfaces)
        current = current.superclass
    return found


def hierarchy(cls: TypeDescriptor, include_interfaces: bool = False) -> Iterator[TypeDescriptor]:
    """Iterate ``cls`` and its ancestors.

    Without interfaces this is the superclass chain starting at ``cls``. With
    interfaces, each class is followed by its not-yet-seen interfaces
    (depth-first) before moving on to its superclass.

    Public helper; ``get_override_hierarchy`` visits ancestors in the same
    order but walks them itself so it can prune a subtree.
    """
    seen_interfaces: set[int] = set()
    current: TypeDescriptor | None = cls
    while current is not None:
        yield current
        if include_interfaces:
            pending: list[TypeDescriptor] = []
            _collect_interfaces(current, pending, seen_interfaces)
            yield from pending
        current = current.superclass


def _collect_interfaces(
    cls: TypeDescriptor, into: list[TypeDescriptor], seen: set[int]
) -> None:
    for iface in cls.interfaces:
        if id(iface) not in seen:
            seen.add(id(iface))
            into.append(iface)
        _collect_interfaces(iface, into, seen)


def type_arguments(
    cls: TypeDescriptor, ancestor: TypeDescriptor
) -> dict[TypeVariable, GenericType] | None:
    """Type-variable bindings accumulated on the way from ``cls`` up to ``ancestor``.

    Each parameterized supertype on the path binds the type parameters of its
    raw type to the arguments written in the subtype's declaration. Bindings
    may refer to variables bound further down the path, so apply them with
    ``Substitution``, which follows chains.

    Returns:
        The bindings, or None if ``ancestor`` is not an ancestor of ``cls``.
    """
    if cls is ancestor:
        return {}
    parents: list[tuple[GenericType | None, TypeDescriptor]] = []
    if cls.superclass is not None:
        parents.append((cls.generic_superclass, cls.superclass))
    shapes = list(cls.generic_interfaces) + [None] * (len(cls.interfaces) - len(cls.generic_interfaces))
    parents.extend(zip(shapes, cls.interfaces))

    for shape, parent in parents:
        if not is_subtype(parent, ancestor):
            continue
        rest = type_arguments(parent, ancestor)
        if rest is None:
            continue
        bindings = dict(rest)
        if isinstance(shape, ParameterizedType):
            bindings.update(zip(parent.type_parameters, shape.arguments))
        return bindings
    return None


def all_superclasses_and_interfaces(cls: TypeDescriptor) -> list[TypeDescriptor]:
    """Superclasses and interfaces of ``cls`` interleaved breadth-first.

    The two lists are merged alternately, one interface then one superclass,
    so ancestors nearer to ``cls`` come first in either list.
    """
    superclasses = all_superclasses(cls)
    interfaces = all_interfaces(cls)
    result: list[TypeDescriptor] = []
    super_index = 0
    iface_index = 0
    while iface_index < len(interfaces) or super_index < len(superclasses):
        if iface_index >= len(interfaces):
            result.append(superclasses[super_index])
            super_index += 1
        elif super_index >= len(superclasses) or super_index >= iface_index:
            result.append(interfaces[iface_index])
            iface_index += 1
        else:
            result.append(superclasses[super_index])
            super_index += 1
    return result
