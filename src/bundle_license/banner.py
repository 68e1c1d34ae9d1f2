"""Banner template loading and rendering."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment

from .log import prefixed

EOL = "\n"
DEFAULT_ENCODING = "utf-8"


class BannerError(RuntimeError):
    """Raised when the banner cannot be read or rendered."""


@dataclass(frozen=True)
class CommentStyle:
    start: str
    body: str
    end: str


# ``none`` leaves the rendered text untouched.
COMMENT_STYLES: dict[str, CommentStyle | None] = {
    "regular": CommentStyle(start="/**", body=" *", end=" */"),
    "ignored": CommentStyle(start="/*!", body=" *", end=" */"),
    "slash": CommentStyle(start="//", body="//", end="//"),
    "none": None,
}

_environment = Environment(keep_trailing_newline=True, autoescape=False)


def read_banner(banner: Any) -> str | None:
    """Return the raw banner template described by the ``banner`` option.

    The option may be a template string, a callable returning one, or a
    mapping whose ``content`` is a string, a callable or ``{file, encoding}``.
    """
    if banner is None:
        return None

    if isinstance(banner, str):
        return banner

    if callable(banner):
        return banner()

    content = banner.get("content")
    if callable(content):
        content = content()

    if isinstance(content, str):
        return content

    if not isinstance(content, Mapping) or "file" not in content:
        raise BannerError(
            prefixed(
                "Cannot find banner content, please specify an inline content, "
                "or a path to a file"
            )
        )

    path = Path(content["file"]).resolve()
    encoding = content.get("encoding") or DEFAULT_ENCODING
    if not path.is_file():
        raise BannerError(prefixed(f"Template file {path} does not exist, or cannot be read"))

    return path.read_text(encoding=encoding)


def default_comment_style(text: str) -> str:
    """Text already starting with a block comment is left as is."""
    start = text.strip()[:3]
    return "none" if start in ("/**", "/*!") else "regular"


def generate_block_comment(text: str, style: CommentStyle) -> str:
    lines = [style.start]
    for line in text.strip().splitlines():
        line = line.rstrip()
        lines.append(f"{style.body} {line}" if line else style.body)
    lines.append(style.end)
    return EOL.join(lines) + EOL


def render_template(source: str, context: Mapping[str, Any]) -> str:
    return _environment.from_string(source).render(**context)


def render_banner(
    source: str, context: Mapping[str, Any], comment_style: str | None = None
) -> str:
    """Render ``source`` with ``context`` and wrap the result in a comment.

    Without an explicit ``comment_style`` the ``regular`` style is used,
    unless the rendered text is already a block comment.
    """
    text = render_template(source, context)

    style_name = comment_style if comment_style is not None else default_comment_style(text)
    if style_name not in COMMENT_STYLES:
        raise BannerError(
            f"Unknown comment style {style_name}, please use one of: "
            f"{', '.join(COMMENT_STYLES.keys())}"
        )

    style = COMMENT_STYLES[style_name]
    if style is None:
        return text
    return generate_block_comment(text, style)
