"""
Field name formatters.

Includes:
- Case conversion (camelCase <-> snake_case <-> PascalCase)
- FieldFormatter: the pluggable to_canonical / to_external pair
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Union

from .errors import ConfigError


# =============================================================================
# Case conversion utilities
# =============================================================================

_CAMEL_TO_SNAKE_PATTERN = re.compile(r'(?<=[a-z0-9])(?=[A-Z])')
_LETTER_DIGIT_PATTERN = re.compile(r'(?<=[A-Za-z])(?=\d)')
_SNAKE_TO_CAMEL_PATTERN = re.compile(r'_([a-z0-9])')


def to_snake_case(name: str) -> str:
    """
    Convert camelCase or PascalCase to snake_case.

    Examples:
        isOverdue -> is_overdue
        PriorityScore -> priority_score
        HTTPStatus -> http_status
        addressLine1 -> address_line_1
    """
    if "_" in name and name.islower():
        return name
    result = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
    result = _CAMEL_TO_SNAKE_PATTERN.sub('_', result)
    result = _LETTER_DIGIT_PATTERN.sub('_', result)
    return result.lower()


def to_camel_case(name: str) -> str:
    """
    Convert snake_case to camelCase.

    Examples:
        is_overdue -> isOverdue
        address_line_1 -> addressLine1
    """
    def replace_underscore(match):
        return match.group(1).upper()

    return _SNAKE_TO_CAMEL_PATTERN.sub(replace_underscore, name)


def to_pascal_case(name: str) -> str:
    """
    Convert snake_case to PascalCase.

    Examples:
        priority_score -> PriorityScore
    """
    camel = to_camel_case(name)
    return camel[0].upper() + camel[1:] if camel else camel


def _identity(name: str) -> str:
    return name


# =============================================================================
# Formatter
# =============================================================================


@dataclass(frozen=True)
class FieldFormatter:
    """
    Translates between client-facing and canonical field names.

    ``to_canonical`` is applied to incoming identifiers and argument keys,
    ``to_external`` when rendering field paths and extracted output.
    """
    name: str
    canonical: Callable[[str], str]
    external: Callable[[str], str]

    def to_canonical(self, external_name: str) -> str:
        return self.canonical(str(external_name))

    def to_external(self, internal_name: str) -> str:
        return self.external(str(internal_name))


CAMEL_CASE = FieldFormatter("camel_case", to_snake_case, to_camel_case)
SNAKE_CASE = FieldFormatter("snake_case", _identity, _identity)
PASCAL_CASE = FieldFormatter("pascal_case", to_snake_case, to_pascal_case)

BUILTIN_FORMATTERS: dict[str, FieldFormatter] = {
    f.name: f for f in (CAMEL_CASE, SNAKE_CASE, PASCAL_CASE)
}

FormatterSpec = Union[str, FieldFormatter, tuple]


def get_formatter(spec: FormatterSpec) -> FieldFormatter:
    """
    Resolve a formatter from a name, an instance, or a callable pair.

    Args:
        spec: "camel_case" | "snake_case" | "pascal_case", a FieldFormatter,
              or a (to_canonical, to_external) tuple of callables

    Raises:
        ConfigError: If the name is unknown or the pair is not callable
    """
    if isinstance(spec, FieldFormatter):
        return spec

    if isinstance(spec, tuple):
        if len(spec) != 2 or not all(callable(fn) for fn in spec):
            raise ConfigError("Custom formatter must be a (to_canonical, to_external) pair of callables")
        return FieldFormatter("custom", spec[0], spec[1])

    formatter = BUILTIN_FORMATTERS.get(spec)
    if formatter is None:
        raise ConfigError(
            f"Unknown field formatter '{spec}', must be one of {sorted(BUILTIN_FORMATTERS)}"
        )
    return formatter
