"""Plugin option schema, deprecated-option migration and validation."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .log import prefixed, warn
from .validators.schema import (
    ALLOW_UNKNOWN,
    any_value,
    array_of,
    boolean,
    format_path,
    func,
    object_of,
    string,
    validate_schema,
)


class OptionsError(RuntimeError):
    """Raised when the plugin options do not match the schema."""


def _output_schema() -> list:
    return [
        func(),
        string(),
        object_of(
            {
                "file": string(),
                "encoding": string(),
                "template": [string(), func()],
            }
        ),
    ]


SCHEMA: dict[str, Any] = {
    "debug": boolean(),
    "cwd": string(),
    "banner": [
        func(),
        string(),
        object_of(
            {
                "comment_style": string(),
                "data": any_value(),
                "content": [
                    func(),
                    string(),
                    object_of({"file": string(), "encoding": string()}),
                ],
            }
        ),
    ],
    "third_party": [
        func(),
        object_of(
            {
                "include_private": boolean(),
                "include_self": boolean(),
                "multiple_versions": boolean(),
                "allow": [
                    string(),
                    func(),
                    object_of(
                        {
                            "test": [string(), func()],
                            "fail_on_unlicensed": boolean(),
                            "fail_on_violation": boolean(),
                        }
                    ),
                ],
                "output": [*_output_schema(), array_of(_output_schema())],
            }
        ),
    ],
}


def _warn_deprecated(deprecated_name: str, name: str) -> None:
    warn(
        f'"{deprecated_name}" has been deprecated and will be removed in a future version, '
        f'please use "{name}" instead.'
    )


def _fix_banner_options(options: dict[str, Any]) -> dict[str, Any]:
    """Move ``banner.file``/``banner.encoding`` into ``banner.content``."""
    banner = options.get("banner")
    if not isinstance(banner, Mapping):
        return options

    has_file = "file" in banner
    has_encoding = "encoding" in banner
    if not has_file and not has_encoding:
        return options

    if has_file:
        _warn_deprecated("banner.file", "banner.content.file")
    if has_encoding:
        _warn_deprecated("banner.encoding", "banner.content.encoding")

    new_banner = {k: v for k, v in banner.items() if k not in ("file", "encoding")}
    if "content" not in new_banner:
        new_banner["content"] = {k: banner[k] for k in ("file", "encoding") if k in banner}

    return {**options, "banner": new_banner}


def _fix_third_party_options(options: dict[str, Any]) -> dict[str, Any]:
    """Move ``third_party.encoding`` into ``third_party.output.encoding``."""
    third_party = options.get("third_party")
    if not isinstance(third_party, Mapping) or "encoding" not in third_party:
        return options

    _warn_deprecated("third_party.encoding", "third_party.output.encoding")

    new_third_party = {k: v for k, v in third_party.items() if k != "encoding"}
    if isinstance(third_party.get("output"), str):
        new_third_party["output"] = {
            "file": third_party["output"],
            "encoding": third_party["encoding"],
        }

    return {**options, "third_party": new_third_party}


def normalize_options(options: Mapping[str, Any] | None) -> dict[str, Any]:
    normalized = dict(options or {})
    for fix in (_fix_banner_options, _fix_third_party_options):
        normalized = fix(normalized)
    return normalized


def validate_options(options: Mapping[str, Any]) -> None:
    """Warn about unknown options and raise OptionsError on any other violation."""
    errors = validate_schema(options, SCHEMA)
    if not errors:
        return

    messages: list[str] = []
    for error in errors:
        if error.type == ALLOW_UNKNOWN:
            allowed = ", ".join(SCHEMA.keys())
            warn(f'Unknown property: "{format_path(error.path)}", allowed options are: {allowed}.')
        else:
            messages.append(error.message or "")

    if messages:
        raise OptionsError(
            prefixed(f"Error during validation of option object: {' ; '.join(messages)}")
        )


def license_plugin_options(options: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a normalised copy of ``options`` after validating it."""
    normalized = normalize_options(options)
    validate_options(normalized)
    return normalized
