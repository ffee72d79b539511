"""Annotation lookup on methods and across type hierarchies."""

from __future__ import annotations

import logging

from refract.core.errors import InvalidArgumentError
from refract.core.models import AnnotationDef
from refract.reflect.matching import get_matching_accessible_method, get_matching_method
from refract.types.compat import all_superclasses_and_interfaces
from refract.types.descriptors import MethodDescriptor, TypeDescriptor
from refract.types.members import public_methods

logger = logging.getLogger(__name__)

Marker = str | TypeDescriptor


def _marker_name(marker: Marker | None) -> str:
    if marker is None:
        raise InvalidArgumentError("annotation marker must not be None")
    name = marker if isinstance(marker, str) else marker.name
    if not name:
        raise InvalidArgumentError("annotation marker must not be empty")
    return name


def get_methods_with_annotation(
    cls: TypeDescriptor,
    marker: Marker,
    search_supers: bool = False,
    ignore_access: bool = False,
) -> list[MethodDescriptor]:
    """Collect methods carrying ``marker``.

    Args:
        cls: Type to search first.
        marker: Annotation name, or the annotation's type descriptor.
        search_supers: Also search superclasses and interfaces, interleaved
            nearest first.
        ignore_access: Consider every declared method instead of public ones.

    Returns:
        Matching methods without duplicates, in discovery order.

    Raises:
        InvalidArgumentError: If ``cls`` or ``marker`` is None.
    """
    if cls is None:
        raise InvalidArgumentError("type must not be None")
    name = _marker_name(marker)

    owners = [cls, *all_superclasses_and_interfaces(cls)] if search_supers else [cls]
    result: list[MethodDescriptor] = []
    seen: set[int] = set()
    for owner in owners:
        methods = owner.declared_methods() if ignore_access else public_methods(owner)
        for method in methods:
            if id(method) in seen or not method.has_annotation(name):
                continue
            seen.add(id(method))
            result.append(method)
    return result


def get_annotation(
    method: MethodDescriptor,
    marker: Marker,
    search_supers: bool = False,
    ignore_access: bool = False,
) -> AnnotationDef | None:
    """Find ``marker`` on ``method`` or, optionally, on the methods it overrides.

    Ancestors are searched in ``all_superclasses_and_interfaces`` order and
    the first annotation found wins.

    Raises:
        InvalidArgumentError: If ``method`` or ``marker`` is None.
        AmbiguousMethodError: If ``ignore_access`` is set and an ancestor's
            equivalent method cannot be chosen unambiguously.
    """
    if method is None:
        raise InvalidArgumentError("method must not be None")
    name = _marker_name(marker)
    if not ignore_access and not method.is_public:
        return None

    annotation = method.get_annotation(name)
    if annotation is not None or not search_supers:
        return annotation

    lookup = get_matching_method if ignore_access else get_matching_accessible_method
    for ancestor in all_superclasses_and_interfaces(method.declaring_type):
        equivalent = lookup(ancestor, method.name, *method.parameter_types)
        if equivalent is None:
            continue
        annotation = equivalent.get_annotation(name)
        if annotation is not None:
            logger.debug("Found %s for %s on %s", name, method.name, ancestor.name)
            return annotation
    return None
