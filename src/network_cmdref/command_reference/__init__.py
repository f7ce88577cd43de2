"""Command Reference - declarative CLI command templates per feature.

Maps an abstract (feature, name) pair onto the platform-specific CLI
commands, output patterns and defaults described in YAML documents:
- One document per feature, with a shared _template entry
- Product id regex, platform filter and 'else' branches
- Named (<ip>) and printf-style (%s) command templates

Usage:
    from network_cmdref.command_reference import CommandReference

    cmd_ref = CommandReference(product="N9K-C9396PX", platform="nexus", cli=True)
    ref = cmd_ref.lookup("tacacs_server_host", "host")
    ref.config_set(state="no", ip="10.1.1.1")
    # ['no tacacs-server host 10.1.1.1']
"""

from .catalog import CommandReference, DEFAULT_CMD_REF_DIR
from .entry import CommandRef
from .errors import (
    CommandReferenceError,
    LoadError,
    ResolutionError,
    InvocationError,
    ConstructionError,
)
from .loader import load_document, discover_documents
from .merge import hash_merge, value_append
from .schema import (
    KEYS,
    KNOWN_FILTERS,
    FieldValue,
    StaticValue,
    NamedTemplate,
    PositionalTemplate,
    preprocess_value,
)
from .validator import validate_node

__all__ = [
    # Main catalog
    "CommandReference",
    "CommandRef",
    "DEFAULT_CMD_REF_DIR",
    # Errors
    "CommandReferenceError",
    "LoadError",
    "ResolutionError",
    "InvocationError",
    "ConstructionError",
    # Field values
    "KEYS",
    "KNOWN_FILTERS",
    "FieldValue",
    "StaticValue",
    "NamedTemplate",
    "PositionalTemplate",
    "preprocess_value",
    # Components (for advanced use)
    "load_document",
    "discover_documents",
    "hash_merge",
    "value_append",
    "validate_node",
]
