"""Lightweight schema validation for plugin option mappings.

A schema maps each allowed key to one validator, or to a list of validators
accepted with OR semantics. Validators may carry a nested schema that is
applied to the value once the validator matched.

Validation never raises: every violation is returned as a ``SchemaError`` and
the caller decides which ones are fatal.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

ALLOW_UNKNOWN = "object.allowUnknown"

PathSegment: TypeAlias = "str | int"


@dataclass(frozen=True)
class Validator:
    """A single typed alternative accepted for a value."""

    type: str
    message: str | None
    schema: Any
    test: Callable[[Any], bool]


@dataclass(frozen=True)
class SchemaError:
    """Violation found at ``path``."""

    path: tuple[PathSegment, ...]
    message: str | None = None
    type: str | None = None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {"path": list(self.path)}
        if self.message is not None:
            data["message"] = self.message
        if self.type is not None:
            data["type"] = self.type
        return data


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_object(value: Any) -> bool:
    return isinstance(value, Mapping)


def string() -> Validator:
    return Validator("object.type.string", "must be a string", None, lambda v: isinstance(v, str))


def boolean() -> Validator:
    return Validator("object.type.boolean", "must be a boolean", None, lambda v: isinstance(v, bool))


def func() -> Validator:
    return Validator("object.type.func", "must be a function", None, callable)


def object_of(schema: Mapping[str, Any]) -> Validator:
    return Validator("object.type.object", "must be an object", schema, _is_object)


def array_of(schema: Any) -> Validator:
    return Validator("object.type.array", "must be an array", schema, _is_array)


def any_value() -> Validator:
    return Validator("object.any", None, None, lambda v: True)


def format_path(path: Sequence[PathSegment]) -> str:
    """Render ``("a", "b", 0)`` as ``a.b[0]``."""
    text = ""
    for segment in path:
        if isinstance(segment, int) and not isinstance(segment, bool):
            text += f"[{segment}]"
        elif not text:
            text += str(segment)
        else:
            text += f".{segment}"
    return text


def _as_validators(schema: Any) -> list[Validator]:
    if isinstance(schema, Validator):
        return [schema]
    return list(schema)


def _validate_item(value: Any, schema: Any, path: tuple[PathSegment, ...]) -> list[SchemaError]:
    # value is never None here
    validators = _as_validators(schema)
    matched = [validator for validator in validators if validator.test(value)]

    if not matched:
        message = " OR ".join(f'"{format_path(path)}" {validator.message}' for validator in validators)
        return [SchemaError(path=path, message=message)]

    errors: list[SchemaError] = []
    for validator in matched:
        if validator.schema is not None:
            errors.extend(validate_schema(value, validator.schema, path))
    return errors


def _validate_object(
    obj: Mapping[Any, Any], schema: Mapping[str, Any], current: tuple[PathSegment, ...]
) -> list[SchemaError]:
    errors: list[SchemaError] = []
    for key, value in obj.items():
        if value is None:
            continue

        path = (*current, key)
        if key not in schema:
            errors.append(SchemaError(path=path, type=ALLOW_UNKNOWN))
        else:
            errors.extend(_validate_item(value, schema[key], path))
    return errors


def _validate_array(
    array: Sequence[Any], schema: Any, current: tuple[PathSegment, ...]
) -> list[SchemaError]:
    errors: list[SchemaError] = []
    for index, item in enumerate(array):
        path = (*current, index)
        if item is None:
            errors.append(SchemaError(path=path, message=f'"{format_path(path)}" is null.'))
            continue
        errors.extend(_validate_item(item, schema, path))
    return errors


def validate_schema(
    obj: Any, schema: Any, current: Sequence[PathSegment] = ()
) -> list[SchemaError]:
    """Return every violation of ``schema`` found in ``obj``.

    Lists are validated element by element and a ``None`` element is an
    error. Mappings are validated key by key and a ``None`` value is treated
    as "not provided". Anything else yields no error.
    """
    current = tuple(current)
    if _is_array(obj):
        return _validate_array(obj, schema, current)
    if _is_object(obj):
        return _validate_object(obj, schema, current)
    return []
