"""Catalog settings loaded from YAML with environment overrides.

Example cmdref.yaml:

```yaml
product: N9K-C9396PX
platform: nexus
cli: true
# cmd_ref_dir: /opt/cmd_ref
```

Environment Variables:
    CMDREF_PRODUCT: Product id (overrides 'product')
    CMDREF_PLATFORM: Platform name (overrides 'platform')
    CMDREF_CLI: 1/true/yes/on to enable CLI-only entries
    CMDREF_DIR: Directory of command reference documents
"""
import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..command_reference.errors import LoadError

logger = logging.getLogger(__name__)

TRUE_VALUES = {"1", "true", "yes", "on"}


class CatalogSettings(BaseModel):
    """Parameters for building a command reference catalog."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    product: Optional[str] = None
    platform: Optional[str] = None
    cli: bool = False
    # Explicit document list - skips discovery and product filtering
    files: Optional[list[Path]] = None
    cmd_ref_dir: Optional[Path] = None

    @field_validator("product", "platform", mode="before")
    @classmethod
    def _empty_as_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


def find_settings_file() -> Optional[Path]:
    """Find the cmdref.yaml settings file, if any."""
    search_paths = [
        Path.cwd() / "configs" / "cmdref.yaml",
        Path.cwd() / "cmdref.yaml",
        Path.home() / ".config" / "network-cmdref" / "cmdref.yaml",
        Path("/etc/network-cmdref/cmdref.yaml"),
    ]

    for path in search_paths:
        if path.exists():
            return path
    return None


def env_overrides() -> dict:
    """Collect settings overrides from the environment."""
    overrides: dict = {}
    if "CMDREF_PRODUCT" in os.environ:
        overrides["product"] = os.environ["CMDREF_PRODUCT"]
    if "CMDREF_PLATFORM" in os.environ:
        overrides["platform"] = os.environ["CMDREF_PLATFORM"]
    if "CMDREF_CLI" in os.environ:
        overrides["cli"] = os.environ["CMDREF_CLI"].strip().lower() in TRUE_VALUES
    if "CMDREF_DIR" in os.environ:
        overrides["cmd_ref_dir"] = os.environ["CMDREF_DIR"]
    return overrides


def load_settings(config_path: Optional[str] = None) -> CatalogSettings:
    """
    Load catalog settings.

    Args:
        config_path: Settings file to read. When omitted the usual
            locations are searched and a missing file means defaults.

    Returns:
        CatalogSettings with environment overrides applied

    Raises:
        LoadError: If the file can't be read or holds invalid values
    """
    path = Path(config_path) if config_path else find_settings_file()
    data: dict = {}

    if path is not None:
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise LoadError(f"unable to read settings {path}: {e}") from e
        if not isinstance(data, dict):
            raise LoadError(f"Expected a mapping in settings {path}")
        logger.debug(f"Loaded settings from {path}")

    data.update(env_overrides())

    try:
        return CatalogSettings(**data)
    except ValidationError as e:
        raise LoadError(f"Invalid settings in {path or 'environment'}: {e}") from e
