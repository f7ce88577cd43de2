"""Reference entry for a single (feature, name) pair."""
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Optional

from .errors import ConstructionError, LoadError, ResolutionError
from .schema import (
    KEYS,
    TEMPLATE_KEYS,
    FieldValue,
    classify_template,
    freeze,
    preprocess_value,
    thaw,
)

logger = logging.getLogger(__name__)


class CommandRef:
    """
    Resolved, read-only definition of one attribute of a feature.

    Plain fields read back as values, with '/regex/' strings compiled.
    config_set and config_get_token read back as callable FieldValues:

        ref = cmd_ref.lookup("tacacs_server_host", "timeout")
        ref.default_value                       # 0
        ref.config_set(state="", ip="10.1.1.1", timeout=5)
        ref.get("config_get_token?")            # True
    """

    __slots__ = ("_feature", "_name", "_file", "_values", "_fields")

    def __init__(
        self,
        feature: str,
        name: str,
        values: Mapping[str, Any],
        file: Optional[str] = None,
    ):
        """
        Build an entry from a merged spec.

        Args:
            feature: Feature the entry belongs to
            name: Attribute name within the feature
            values: Merged field mapping
            file: Originating document, for messages only

        Raises:
            ConstructionError: If values is not a mapping
            LoadError: On a key that is not a field key
        """
        if not isinstance(values, Mapping):
            raise ConstructionError(f"'{values}' is not a hash.")

        resolved: dict[str, Any] = {}
        fields: dict[str, FieldValue] = {}
        for key, value in values.items():
            if key not in KEYS:
                raise LoadError(f"Unrecognized key {key} for {feature}, {name} in {file}")
            if value is None:
                # default_value may be explicitly nil, anything else is unset
                if key == "default_value":
                    resolved[key] = None
                continue
            if key in TEMPLATE_KEYS:
                if not isinstance(value, list):
                    value = [value]
                fields[key] = classify_template(key, value)
            resolved[key] = freeze(preprocess_value(value))

        object.__setattr__(self, "_feature", feature)
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_file", file)
        object.__setattr__(self, "_values", MappingProxyType(resolved))
        object.__setattr__(self, "_fields", MappingProxyType(fields))

    def __setattr__(self, key: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only")

    @property
    def feature(self) -> str:
        return self._feature

    @property
    def name(self) -> str:
        return self._name

    @property
    def file(self) -> Optional[str]:
        return self._file

    @property
    def values(self) -> Mapping[str, Any]:
        """Resolved field values, read-only all the way down."""
        return self._values

    def has(self, key: str) -> bool:
        """Check if a field is defined with a non-nil value."""
        return self._values.get(key) is not None

    def get(self, key: str) -> Any:
        """
        Read a field.

        'field?' queries presence instead of reading the value.

        Raises:
            ResolutionError: If the field is not defined for this entry
        """
        if key.endswith("?") and key[:-1] in KEYS:
            return self.has(key[:-1])
        if key not in KEYS:
            raise ResolutionError(f"Unknown field '{key}' for {self._feature}, {self._name}")
        if key not in self._values:
            raise ResolutionError(f"No {key} defined for {self._feature}, {self._name}")
        if key in self._fields:
            return self._fields[key]
        return thaw(self._values[key])

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __getattr__(self, key: str) -> Any:
        if key in KEYS:
            return self.get(key)
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{key}'")

    def test_config_result(
        self,
        value: Any,
        constants: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """
        Look up the expected result for a test value.

        Deprecated: constants maps legacy string results (e.g.
        "RuntimeError") onto the objects a feature wrapper expects.
        New documents should not rely on it.
        """
        results = self.get("test_config_result")
        try:
            result = results[value]
        except (KeyError, TypeError) as e:
            raise ResolutionError(
                f"No test_config_result for {value!r} in {self._feature}, {self._name}"
            ) from e
        if constants and isinstance(result, str) and result in constants:
            logger.debug(f"Mapping legacy result '{result}' for {self._feature}, {self._name}")
            return constants[result]
        return result

    def valid(self) -> bool:
        """Check that the entry knows its identity."""
        return bool(self._feature and self._name)

    def __str__(self) -> str:
        lines = [f"Command: {self._feature} {self._name}"]
        for key, value in self._values.items():
            lines.append(f"  {key}: {thaw(value)}")
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return f"<CommandRef {self._feature}/{self._name}>"
