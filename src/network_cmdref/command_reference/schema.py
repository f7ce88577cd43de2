"""Schema definitions for command reference documents.

Defines the recognized document keys and the field value variants
that a resolved reference entry holds.
"""
import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .errors import InvocationError, LoadError


# Field keys allowed in an attribute spec
KEYS = (
    "default_value",
    "config_set",
    "config_set_append",
    "config_get",
    "config_get_token",
    "config_get_token_append",
    "test_config_get",
    "test_config_get_regex",
    "test_config_result",
)

# Append keys and the field each one extends
APPEND_KEYS = {
    "config_set_append": "config_set",
    "config_get_token_append": "config_get_token",
}

# Fields that are always lists and may be templated
TEMPLATE_KEYS = ("config_get_token", "config_set")

# Platform / API filter keys
KNOWN_FILTERS = ("cli_nexus", "cli_ios_xr")

# Fallback branch taken when no product id regex matched
ELSE_KEY = "else"

# File-level base entry
TEMPLATE_ENTRY = "_template"

PLACEHOLDER = re.compile(r"<([^<>\s]+)>")
PRINTF_MARKER = re.compile(r"%%|%")


def is_regex_key(key: Any) -> bool:
    """Check if a document key is a product id regex like '/^N3K/'."""
    return isinstance(key, str) and len(key) >= 2 and key[0] == "/" and key[-1] == "/"


def compile_regex(pattern: str, flags: int = 0) -> re.Pattern:
    """
    Compile a document regex.

    Raises:
        LoadError: If the pattern is not a valid regex
    """
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise LoadError(f"Invalid regex '{pattern}': {e}") from e


def preprocess_value(value: Any) -> Any:
    """
    Convert regexp-like strings into compiled patterns.

    '/foo/' becomes re.compile('foo') and '/foo/i' becomes a
    case-insensitive pattern. Lists are converted item by item,
    anything else is returned unchanged.

    Raises:
        LoadError: If a regexp-like string doesn't compile
    """
    if isinstance(value, (list, tuple)):
        return [preprocess_value(item) for item in value]
    if isinstance(value, str) and len(value) >= 2 and value[0] == "/":
        if value[-1] == "/":
            return compile_regex(value[1:-1])
        if len(value) >= 3 and value[-2:] == "/i":
            return compile_regex(value[1:-2], re.IGNORECASE)
    return value


def freeze(value: Any) -> Any:
    """Read-only copy of a field value: lists become tuples, mappings proxies."""
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    return value


def thaw(value: Any) -> Any:
    """Fresh mutable copy of a frozen field value."""
    if isinstance(value, tuple):
        return [thaw(item) for item in value]
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    return value


def count_printf_markers(line: str) -> int:
    """Count '%' conversions in a line, ignoring literal '%%'."""
    return sum(1 for m in PRINTF_MARKER.finditer(line) if m.group() != "%%")


# --- Field values ---

@dataclass(frozen=True)
class StaticValue:
    """Fixed lines returned regardless of arguments."""
    value: tuple

    def __call__(self, *args: Any, **kwargs: Any) -> list:
        return list(self.value)


@dataclass(frozen=True)
class NamedTemplate:
    """Lines with <name> placeholders filled from keyword arguments."""
    key: str
    lines: tuple[str, ...]

    def __call__(self, *args: Any, **kwargs: Any) -> list:
        if args:
            raise InvocationError(
                f"{self.key} takes keyword arguments only, got {len(args)} positional"
            )
        result = []
        for line in self.lines:
            if not isinstance(line, str):
                result.append(line)
                continue
            for item in PLACEHOLDER.findall(line):
                if item in kwargs:
                    value = kwargs[item]
                    line = line.replace(f"<{item}>", "" if value is None else str(value), 1)
            # A line is only emitted once all of its placeholders are filled
            if not PLACEHOLDER.search(line):
                result.append(line)
        try:
            return preprocess_value(result)
        except LoadError as e:
            raise InvocationError(f"{self.key} rendered {e}") from e


@dataclass(frozen=True)
class PositionalTemplate:
    """printf-style lines filled left to right from positional arguments."""
    key: str
    lines: tuple[str, ...]
    arg_count: int

    def __call__(self, *args: Any, **kwargs: Any) -> list:
        if kwargs or len(args) != self.arg_count:
            raise InvocationError(
                f"Given {len(args) + len(kwargs)} args, but {self.key} "
                f"requires {self.arg_count}"
            )
        remaining = list(args)
        result = []
        for line in self.lines:
            if not isinstance(line, str):
                result.append(line)
                continue
            count = count_printf_markers(line)
            line_args, remaining = tuple(remaining[:count]), remaining[count:]
            result.append(line % line_args if count else line.replace("%%", "%"))
        try:
            return preprocess_value(result)
        except LoadError as e:
            raise InvocationError(f"{self.key} rendered {e}") from e


FieldValue = StaticValue | NamedTemplate | PositionalTemplate


def classify_template(key: str, lines: list) -> FieldValue:
    """Pick the field value variant for a list-valued template field."""
    strings = [line for line in lines if isinstance(line, str)]
    if any(PLACEHOLDER.search(line) for line in strings):
        return NamedTemplate(key, tuple(lines))
    arg_count = sum(count_printf_markers(line) for line in strings)
    if arg_count:
        return PositionalTemplate(key, tuple(lines), arg_count)
    return StaticValue(tuple(preprocess_value(lines)))
