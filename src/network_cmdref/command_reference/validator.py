"""Structural validation of command reference documents.

Runs on the YAML node tree, before it is constructed into Python
objects, because construction silently keeps only the last of any
duplicated keys.
"""
import logging
from typing import Optional

import yaml

from .errors import LoadError

logger = logging.getLogger(__name__)

# Labels for error messages, by depth into the document
DEPTH_LABELS = ("feature", "name", "param")


def depth_label(depth: int) -> str:
    """Describe what the keys at a given depth are."""
    if depth < len(DEPTH_LABELS):
        return DEPTH_LABELS[depth]
    return "key"


def validate_node(
    node: Optional[yaml.Node],
    filename: str,
    depth: int = 0,
    parents: Optional[str] = None,
) -> None:
    """
    Validate a YAML node tree, then recurse to its children.

    Checks every mapping level:
    - No duplicate keys
    - Keys directly under the document root are in alphabetical order

    Args:
        node: Node to validate
        filename: File the YAML was parsed from, for messages
        depth: Depth of the parent node into the tree
        parents: Description of the enclosing keys, for messages

    Raises:
        LoadError: If the tree violates a structural constraint
    """
    if node is None or isinstance(node, yaml.ScalarNode):
        return
    depth += 1

    # No special validation for sequences - just recurse
    if isinstance(node, yaml.SequenceNode):
        for child in node.value:
            validate_node(child, filename, depth, parents)
        return

    if not isinstance(node, yaml.MappingNode):
        return

    label = depth_label(depth)
    logger.debug(f"Validating mapping at depth {depth}{parents or ''} in {filename}")
    keys: list[str] = []
    for key_node, _ in node.value:
        if not isinstance(key_node, yaml.ScalarNode):
            raise LoadError(
                f"Unsupported complex {label}{parents or ''} in {filename}: "
                f"{key_node.start_mark}"
            )
        keys.append(key_node.value)

    seen: set[str] = set()
    for key in keys:
        if key in seen:
            raise LoadError(f"Duplicate {label} '{key}'{parents or ''} in {filename}!")
        seen.add(key)

    if depth == 1:
        last_key = None
        for key in keys:
            if last_key is not None and key < last_key:
                raise LoadError(
                    f"Entries out of order in {filename}: ({last_key} > {key})"
                )
            last_key = key

    # Key nodes are plain scalars here, so only the values need a visit
    for key_node, val_node in node.value:
        if parents:
            new_parents = f"{parents}, {label} '{key_node.value}'"
        else:
            new_parents = f" under {label} '{key_node.value}'"
        validate_node(val_node, filename, depth, new_parents)
