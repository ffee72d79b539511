"""Packing of trailing arguments for variadic methods."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from refract.core.errors import InvalidArgumentError
from refract.types.compat import primitive_to_wrapper
from refract.types.descriptors import MethodDescriptor, TypedArray, TypeDescriptor

logger = logging.getLogger(__name__)


def _to_char(value: Any) -> str:
    if isinstance(value, int):
        try:
            return chr(value)
        except (ValueError, OverflowError) as e:
            raise InvalidArgumentError(f"Cannot store {value!r} in a char array") from e
    text = str(value)
    if len(text) != 1:
        raise InvalidArgumentError(f"Cannot store {value!r} in a char array")
    return text


# Conversion from a boxed value to the Python value stored in a primitive array
_UNBOX: dict[str, Callable[[Any], Any]] = {
    "boolean": bool,
    "byte": int,
    "short": int,
    "int": int,
    "long": int,
    "char": _to_char,
    "float": float,
    "double": float,
}


def is_canonical(formal_parameter_types: Sequence[TypeDescriptor], args: Sequence[Any]) -> bool:
    """Whether ``args`` already carries the trailing array in last position."""
    if len(args) != len(formal_parameter_types):
        return False
    last = args[-1]
    if last is None:
        return True
    return isinstance(last, TypedArray) and last.array_type is formal_parameter_types[-1]


def canonicalize(
    formal_parameter_types: Sequence[TypeDescriptor], args: Sequence[Any]
) -> Sequence[Any]:
    """Pack trailing arguments into the array the variadic parameter declares.

    Args:
        formal_parameter_types: Erased parameter types; the last is an array type.
        args: Actual arguments.

    Returns:
        ``args`` itself when already canonical, otherwise a tuple with one
        element per formal parameter whose last element is a new ``TypedArray``.

    Raises:
        InvalidArgumentError: If there are no formal parameters, the last one is
            not an array, or fewer arguments than fixed parameters were given.
    """
    if not formal_parameter_types:
        raise InvalidArgumentError("variadic method has no parameters")
    array_type = formal_parameter_types[-1]
    component = array_type.component_type
    if not array_type.is_array or component is None:
        raise InvalidArgumentError(f"{array_type.name} is not an array type")

    if is_canonical(formal_parameter_types, args):
        return args

    fixed = len(formal_parameter_types) - 1
    if len(args) < fixed:
        raise InvalidArgumentError(f"Expected at least {fixed} arguments, got {len(args)}")

    trailing = list(args[fixed:])
    if component.is_primitive:
        boxed = primitive_to_wrapper(component)
        logger.debug(
            "Unboxing %d %s values into %s",
            len(trailing),
            boxed.name if boxed else component.name,
            array_type.name,
        )
        unbox = _UNBOX.get(component.name)
        if unbox is None:
            raise InvalidArgumentError(f"No primitive conversion for {component.name}")
        if any(value is None for value in trailing):
            raise InvalidArgumentError(f"null cannot be stored in {array_type.name}")
        trailing = [unbox(value) for value in trailing]

    return (*args[:fixed], TypedArray(array_type, trailing))


def to_varargs(method: MethodDescriptor, args: Sequence[Any]) -> Sequence[Any]:
    """Canonicalize ``args`` for ``method`` if it is variadic; otherwise return them as is."""
    if not method.is_varargs:
        return args
    return canonicalize(method.parameter_types, args)
