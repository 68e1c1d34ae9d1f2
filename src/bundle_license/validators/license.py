"""License allow-list checks for collected dependencies."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from functools import lru_cache
from typing import Any, TypeAlias

from license_expression import ExpressionError, Licensing, get_spdx_licensing

from ..log import warn
from ..models import UNLICENSED, Dependency

AllowTest: TypeAlias = "str | Callable[[Dependency], bool]"
AllowRule: TypeAlias = "AllowTest | Mapping[str, Any]"


class LicenseViolationError(RuntimeError):
    """Raised when a dependency license does not satisfy the allow rule."""


class UnlicensedDependencyError(LicenseViolationError):
    """Raised when a dependency does not declare any license."""


@lru_cache(maxsize=1)
def _licensing() -> Licensing:
    return get_spdx_licensing()


def normalize_license(license_: str | None) -> str:
    if not license_:
        return UNLICENSED
    return license_.strip()


def _is_unlicensed_value(license_: str) -> bool:
    return license_.upper() == UNLICENSED


def is_unlicensed(dependency: Dependency) -> bool:
    return _is_unlicensed_value(normalize_license(dependency.license))


def _alternatives(expression: str) -> list[frozenset[str]]:
    """Expand an SPDX expression into its OR-alternatives (sets of AND-ed licenses)."""
    licensing = _licensing()
    parsed = licensing.parse(expression, validate=True, strict=True)
    if parsed is None:
        return []

    def expand(node: Any) -> list[frozenset[str]]:
        if isinstance(node, licensing.OR):
            return [branch for arg in node.args for branch in expand(arg)]
        if isinstance(node, licensing.AND):
            combined = [frozenset()]
            for arg in node.args:
                combined = [left | right for left in combined for right in expand(arg)]
            return combined
        return [frozenset({node.render("{symbol.key}").upper()})]

    return expand(parsed)


def satisfies(license_: str, allow: str) -> bool:
    """Tell whether ``license_`` satisfies the SPDX ``allow`` expression.

    One alternative of the license must be fully covered by one alternative
    of the allow rule: ``MIT OR GPL-3.0`` satisfies ``MIT``, while
    ``MIT AND GPL-3.0`` does not.
    """
    try:
        candidates = _alternatives(license_)
        allowed = _alternatives(allow)
    except ExpressionError:
        return False
    return any(candidate <= accepted for candidate in candidates for accepted in allowed)


def is_valid(dependency: Dependency, allow: str) -> bool:
    license_ = normalize_license(dependency.license)
    if _is_unlicensed_value(license_):
        return False
    return satisfies(license_, allow)


def _handle_unlicensed(dependency: Dependency, fail: bool) -> None:
    message = f'Dependency "{dependency.name}" does not specify any license.'
    if fail:
        raise UnlicensedDependencyError(message)
    warn(message)


def _handle_violation(dependency: Dependency, fail: bool) -> None:
    message = (
        f'Dependency "{dependency.name}" has a license ({dependency.license}) which is not '
        "compatible with requirement, looks like a license violation to fix."
    )
    if fail:
        raise LicenseViolationError(message)
    warn(message)


def check_dependency(dependency: Dependency, allow: AllowRule) -> bool:
    """Check one dependency; return True when it is compliant.

    Non-compliant dependencies produce a warning, or an exception when the
    allow rule sets ``fail_on_unlicensed``/``fail_on_violation``.
    """
    if isinstance(allow, Mapping):
        test = allow.get("test")
        fail_on_unlicensed = allow.get("fail_on_unlicensed") is True
        fail_on_violation = allow.get("fail_on_violation") is True
    else:
        test = allow
        fail_on_unlicensed = fail_on_violation = False

    if callable(test):
        compliant = bool(test(dependency))
    else:
        compliant = is_valid(dependency, test)

    if compliant:
        return True

    if is_unlicensed(dependency):
        _handle_unlicensed(dependency, fail_on_unlicensed)
    else:
        _handle_violation(dependency, fail_on_violation)
    return False


def check_dependencies(dependencies: Iterable[Dependency], allow: AllowRule) -> list[Dependency]:
    """Check every dependency except the project itself; return the non-compliant ones."""
    return [
        dependency
        for dependency in dependencies
        if not dependency.is_self and not check_dependency(dependency, allow)
    ]
