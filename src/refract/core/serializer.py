"""Universe serialization and deserialization.

This module provides functions to serialize a Universe to JSON and deserialize
JSON back to Universe structures. Types reference each other by qualified
name, so no cycle handling is needed.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from refract.core.models import Universe


class SerializationError(Exception):
    """Error during serialization or deserialization."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return f"{self.message}: {self.details}" if self.details else self.message


def _format_validation_error(e: ValidationError) -> str:
    error_details = []
    for err in e.errors():
        loc = ".".join(str(x) for x in err["loc"])
        error_details.append(f"{loc}: {err['msg']}")
    return "; ".join(error_details)


def serialize(universe: Universe) -> str:
    """Serialize a Universe to a JSON string.

    Args:
        universe: The universe to serialize.

    Returns:
        JSON string representation of the universe.

    Raises:
        SerializationError: If serialization fails.
    """
    try:
        data = universe.model_dump(mode="json")
        return json.dumps(data, indent=2, ensure_ascii=False)
    except Exception as e:
        raise SerializationError(
            message="Failed to serialize universe",
            details=str(e),
        ) from e


def deserialize(json_str: str) -> Universe:
    """Deserialize a JSON string to a Universe.

    Args:
        json_str: JSON string representation of a universe.

    Returns:
        The deserialized universe.

    Raises:
        SerializationError: If deserialization fails with detailed error info.
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise SerializationError(
            message="Invalid JSON format",
            details=f"Line {e.lineno}, column {e.colno}: {e.msg}",
        ) from e
    return deserialize_from_dict(data)


def serialize_to_dict(universe: Universe) -> dict[str, Any]:
    """Serialize a Universe to a dictionary."""
    return universe.model_dump(mode="json")


def deserialize_from_dict(data: dict[str, Any]) -> Universe:
    """Deserialize a dictionary to a Universe.

    A ``types`` entry may be given either as a mapping keyed by qualified name
    or as a list of type definitions.

    Raises:
        SerializationError: If deserialization fails.
    """
    if isinstance(data, dict) and isinstance(data.get("types"), list):
        types: dict[str, Any] = {}
        for i, t in enumerate(data["types"]):
            key = t.get("qualified_name", f"#{i}") if isinstance(t, dict) else f"#{i}"
            if key in types:
                raise SerializationError(
                    message="Universe validation failed",
                    details=f"types[{i}]: duplicate qualified_name '{key}'",
                )
            types[key] = t
        data = {**data, "types": types}
    try:
        universe = Universe.model_validate(data)
    except ValidationError as e:
        raise SerializationError(
            message="Universe validation failed",
            details=_format_validation_error(e),
        ) from e

    for key, type_def in universe.types.items():
        if key != type_def.qualified_name:
            raise SerializationError(
                message="Universe validation failed",
                details=f"types.{key}: key does not match qualified_name '{type_def.qualified_name}'",
            )
    return universe


def load_universe(path: str | Path) -> Universe:
    """Read and deserialize a universe JSON file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise SerializationError(message=f"Cannot read {path}", details=str(e)) from e
    return deserialize(text)
