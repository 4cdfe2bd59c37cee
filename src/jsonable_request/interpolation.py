"""Placeholder interpolation for request templates.

Placeholders have the form ``{{name}}`` where ``name`` is a key of the data
record. Two rules apply to strings:

- A string that consists of exactly one placeholder for a known key is replaced
  by the record value itself, keeping its type (``"{{id}}"`` -> ``123``).
- Any other string has its placeholders substituted textually, using only the
  scalar entries of the record. The result is always a string unless numeric
  coercion is enabled.

Unknown placeholders are left in place.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Mapping, Sequence
from typing import Any, Union

JsonScalar = Union[str, int, float, bool, None]
JsonValue = Union[JsonScalar, Mapping[str, Any], Sequence[Any]]

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")
_NUMERIC_PATTERN = re.compile(r"-?\d+(?:\.\d+)?")


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


def render_scalar(value: JsonScalar) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _coerce_number(text: str) -> int | float | str:
    if not _NUMERIC_PATTERN.fullmatch(text):
        return text
    if "." in text:
        return float(text)
    return int(text)


def substitute(
    text: str,
    record: Mapping[str, Any],
    *,
    coerce_numeric_strings: bool = False,
) -> str | int | float:
    """Replace every scalar-backed placeholder inside ``text``.

    All tokens are replaced in a single pass, so a substituted value that itself
    looks like a placeholder is not expanded again.
    """

    replaced = False

    def _replace(match: re.Match[str]) -> str:
        nonlocal replaced
        name = match.group(1)
        if name not in record or not _is_scalar(record[name]):
            return match.group(0)
        replaced = True
        return render_scalar(record[name])

    result = PLACEHOLDER_PATTERN.sub(_replace, text)
    if coerce_numeric_strings and replaced:
        return _coerce_number(result)
    return result


def interpolate(
    value: Any,
    record: Mapping[str, Any],
    *,
    coerce_numeric_strings: bool = False,
) -> Any:
    """Resolve placeholders in ``value``, recursing through mappings and sequences."""

    if isinstance(value, str):
        match = PLACEHOLDER_PATTERN.fullmatch(value)
        if match and match.group(1) in record:
            return copy.deepcopy(record[match.group(1)])
        return substitute(value, record, coerce_numeric_strings=coerce_numeric_strings)

    if isinstance(value, Mapping):
        return {
            key: interpolate(item, record, coerce_numeric_strings=coerce_numeric_strings)
            for key, item in value.items()
        }

    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return [
            interpolate(item, record, coerce_numeric_strings=coerce_numeric_strings)
            for item in value
        ]

    return value


def find_placeholders(value: Any) -> list[str]:
    """Return the distinct placeholder names referenced in ``value``, in order."""

    found: list[str] = []

    def _walk(item: Any) -> None:
        if isinstance(item, str):
            for name in PLACEHOLDER_PATTERN.findall(item):
                if name not in found:
                    found.append(name)
        elif isinstance(item, Mapping):
            for nested in item.values():
                _walk(nested)
        elif isinstance(item, Sequence) and not isinstance(item, (bytes, bytearray)):
            for nested in item:
                _walk(nested)

    _walk(value)
    return found
