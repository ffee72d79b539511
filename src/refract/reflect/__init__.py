"""Method resolution: accessibility, overload matching, varargs, overrides and annotations."""

from refract.reflect.accessibility import (
    AccessibleMethod,
    AccessOverride,
    get_accessible,
    grant_access,
    resolve_accessible,
)
from refract.reflect.annotations import get_annotation, get_methods_with_annotation
from refract.reflect.invoker import (
    invoke_exact_method,
    invoke_exact_static_method,
    invoke_method,
    invoke_static_method,
)
from refract.reflect.matching import (
    distance,
    find_matching_accessible_method,
    get_accessible_method,
    get_matching_accessible_method,
    get_matching_method,
    is_matching_method,
)
from refract.reflect.overrides import get_override_hierarchy, overrides
from refract.reflect.varargs import canonicalize, to_varargs

__all__ = [
    "AccessOverride",
    "AccessibleMethod",
    "canonicalize",
    "distance",
    "find_matching_accessible_method",
    "get_accessible",
    "get_accessible_method",
    "get_annotation",
    "get_matching_accessible_method",
    "get_matching_method",
    "get_methods_with_annotation",
    "get_override_hierarchy",
    "grant_access",
    "invoke_exact_method",
    "invoke_exact_static_method",
    "invoke_method",
    "invoke_static_method",
    "is_matching_method",
    "overrides",
    "resolve_accessible",
    "to_varargs",
]
