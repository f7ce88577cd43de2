"""Loader for command reference YAML documents.

Parses a document into a node tree, validates the tree structurally,
then constructs the Python mapping from it.
"""
import logging
import re
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import yaml

from ..utils.logging_config import timed
from .errors import LoadError
from .validator import validate_node

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def feature_name(path: PathLike) -> str:
    """Feature a document belongs to: its file name up to the first dot."""
    return Path(path).name.split(".")[0]


def product_tag(path: PathLike) -> Optional[str]:
    """
    Product id pattern encoded in a scoped file name.

    Examples:
        bgp_af.yaml -> None
        bgp_af.N7K.yaml -> "N7K"
    """
    parts = Path(path).name.split(".")
    if len(parts) > 2:
        return ".".join(parts[1:-1])
    return None


@timed("load_document")
def load_document(path: PathLike) -> dict[str, Any]:
    """
    Read and validate one command reference document.

    Args:
        path: YAML file to load

    Returns:
        Mapping of entry name to attribute spec (empty for an empty file)

    Raises:
        LoadError: If the file is missing, unparsable or malformed
    """
    path = Path(path)
    if not path.exists():
        raise LoadError(f"File {path} doesn't exist.")

    try:
        with open(path, encoding="utf-8") as f:
            loader = yaml.SafeLoader(f)
            try:
                node = loader.get_single_node()
                if node is None:
                    return {}
                # Must see the raw tree: construction drops duplicate keys
                validate_node(node, str(path))
                document = loader.construct_document(node)
            finally:
                loader.dispose()
    except yaml.YAMLError as e:
        raise LoadError(f"unable to parse {path}: {e}") from e
    except OSError as e:
        raise LoadError(f"unable to read {path}: {e}") from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise LoadError(f"Expected a mapping at the top of {path}")
    return document


def discover_documents(
    cmd_ref_dir: PathLike,
    product_id: Optional[str] = None,
) -> list[Path]:
    """
    Find the documents that apply to a product.

    Every '<feature>.yaml' applies. A '<feature>.<pattern>.yaml' file
    only applies when <pattern> matches the product id. Generic files
    sort ahead of the scoped files of the same feature.

    Raises:
        LoadError: If a file name pattern is not a valid regex
    """
    paths = sorted(
        Path(cmd_ref_dir).glob("*.yaml"),
        key=lambda p: (feature_name(p), product_tag(p) is not None, p.name),
    )
    return [p for p in paths if _applies(p, product_id)]


def _applies(path: Path, product_id: Optional[str]) -> bool:
    tag = product_tag(path)
    if tag is None:
        return True
    try:
        pattern = re.compile(tag)
    except re.error as e:
        raise LoadError(f"Invalid regex '{tag}' in file name {path}: {e}") from e
    if product_id is None or not pattern.search(product_id):
        logger.debug(f"Skipping '{path}': not applicable to product {product_id}")
        return False
    return True


def iter_documents(
    paths: Iterable[PathLike],
) -> Iterable[tuple[str, Path, dict[str, Any]]]:
    """Yield (feature, path, document) for each path in order."""
    for path in paths:
        path = Path(path)
        yield feature_name(path), path, load_document(path)
