"""Merge engine for layered attribute specs.

Resolves one attribute spec against a base spec for a given product,
platform and API, producing a flat mapping of field keys to values.
"""
import copy
import logging
from typing import Any, Optional

from .errors import LoadError
from .schema import (
    APPEND_KEYS,
    ELSE_KEY,
    KEYS,
    KNOWN_FILTERS,
    compile_regex,
    is_regex_key,
)

logger = logging.getLogger(__name__)


def value_append(base_value: Any, new_value: Any) -> list:
    """
    Combine two values (either or both may be lists) into one list.

    Examples:
        value_append("foo", "bar") -> ["foo", "bar"]
        value_append("foo", ["bar", "baz"]) -> ["foo", "bar", "baz"]
        value_append(None, "bar") -> ["bar"]
    """
    if base_value is None:
        base_value = []
    elif not isinstance(base_value, list):
        base_value = [base_value]
    if not isinstance(new_value, list):
        new_value = [new_value]
    return base_value + new_value


def filter_applies(key: str, platform: Optional[str], cli: bool) -> bool:
    """Check if a platform/API filter key applies to this caller."""
    if key.startswith("cli") and not cli:
        return False
    return bool(platform) and platform in key


def hash_merge(
    input_spec: Optional[dict[str, Any]],
    base_spec: Optional[dict[str, Any]] = None,
    *,
    product_id: Optional[str] = None,
    platform: Optional[str] = None,
    cli: bool = False,
) -> Optional[dict[str, Any]]:
    """
    Merge an attribute spec over a base spec.

    - Field keys override the base
    - config_set_append / config_get_token_append extend config_set /
      config_get_token, after any direct value set in the same spec
    - '/regex/' sub-specs are merged in when the regex matches product_id
    - Filter sub-specs are merged in when they apply to platform and cli
    - The 'else' sub-spec is merged in when no product regex matched

    Sub-specs are merged after the fields of their parent, in document
    order, so they take precedence.

    Args:
        input_spec: Attribute spec as read from the document
        base_spec: Already resolved spec to build on (not modified)
        product_id: Product id for regex keys
        platform: Platform name for filter keys
        cli: Whether CLI-only filters apply

    Returns:
        The resolved spec (base_spec itself when input_spec is None)

    Raises:
        LoadError: On an unrecognized key or a non-mapping spec
    """
    if input_spec is None:
        return base_spec
    if not isinstance(input_spec, dict):
        raise LoadError(f"Expected a mapping, got '{input_spec}'")

    result = copy.deepcopy(base_spec) if base_spec is not None else {}
    to_inspect: list[dict[str, Any]] = []
    appends: list[tuple[str, Any]] = []
    regexp_match = False

    for key, value in input_spec.items():
        if key in APPEND_KEYS:
            appends.append((APPEND_KEYS[key], value))
        elif key in KEYS:
            result[key] = value
        elif is_regex_key(key):
            pattern = compile_regex(key[1:-1])
            if product_id is None or not pattern.search(product_id):
                continue
            logger.debug(f"Product '{product_id}' matches {key}")
            regexp_match = True
            to_inspect.append(value)
        elif key in KNOWN_FILTERS:
            if not filter_applies(key, platform, cli):
                continue
            to_inspect.append(value)
        elif key == ELSE_KEY:
            # Revisited once all regex keys are known
            continue
        else:
            raise LoadError(f"Unrecognized key '{key}'")

    for target, value in appends:
        result[target] = value_append(result.get(target), value)

    if ELSE_KEY in input_spec and not regexp_match:
        to_inspect.append(input_spec[ELSE_KEY])

    for sub_spec in to_inspect:
        result = hash_merge(
            sub_spec,
            result,
            product_id=product_id,
            platform=platform,
            cli=cli,
        )
    return result
