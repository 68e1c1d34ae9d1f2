"""Third-party summary export.

Each output sink is one of:

- a callable, called with the list of dependencies;
- a file path, written with the default template;
- a mapping ``{file, encoding, template}`` where ``template`` is a Jinja2
  string (rendered with ``dependencies`` and ``now``) or a callable returning
  a string or a list of lines.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from .banner import DEFAULT_ENCODING, EOL, render_template
from .log import prefixed
from .models import Dependency

logger = logging.getLogger("bundle_license")

NO_DEPENDENCIES = "No third parties dependencies"
SEPARATOR = f"{EOL}{EOL}---{EOL}{EOL}"


def default_template(dependencies: Sequence[Dependency]) -> str:
    if not dependencies:
        return NO_DEPENDENCIES
    return SEPARATOR.join(dependency.text() for dependency in dependencies)


def _resolve_template(output: Mapping[str, Any]) -> Callable[[Sequence[Dependency]], Any]:
    template = output.get("template")
    if isinstance(template, str):
        return lambda dependencies: render_template(
            template, {"dependencies": dependencies, "now": datetime.now()}
        )
    if callable(template):
        return template
    return default_template


def _write_output(dependencies: Sequence[Dependency], output: Any, debug: bool) -> None:
    if callable(output):
        output(list(dependencies))
        return

    if isinstance(output, str):
        file, encoding, template = output, DEFAULT_ENCODING, default_template
    else:
        file = output["file"]
        encoding = output.get("encoding") or DEFAULT_ENCODING
        template = _resolve_template(output)

    text = template(list(dependencies))
    if isinstance(text, (list, tuple)):
        text = EOL.join(text)

    if debug:
        logger.debug(prefixed(f"exporting third-party summary to {file}"))
        logger.debug(prefixed(f"use encoding: {encoding}"))

    path = Path(file)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text((text or "").strip(), encoding=encoding)


def export_third_party(
    dependencies: Sequence[Dependency], outputs: Any, debug: bool = False
) -> None:
    """Write ``dependencies`` to one output sink or to a list of them."""
    sinks = outputs if isinstance(outputs, (list, tuple)) else [outputs]
    for output in sinks:
        _write_output(dependencies, output, debug)
