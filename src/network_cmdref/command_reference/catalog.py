"""Command reference catalog - builds and serves every reference entry.

Provides a single entry point for:
1. Locating the documents for a product
2. Loading and validating each document
3. Resolving every entry against the file's _template
4. Looking entries up by (feature, name)
"""
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Optional

from ..utils.logging_config import timed_section
from .entry import CommandRef
from .errors import LoadError, ResolutionError
from .loader import PathLike, discover_documents, iter_documents
from .merge import hash_merge
from .schema import TEMPLATE_ENTRY

if TYPE_CHECKING:
    from ..config.settings import CatalogSettings

# Documents shipped with the package
DEFAULT_CMD_REF_DIR = Path(__file__).resolve().parent.parent / "cmd_ref"


class CommandReference:
    """
    Reference hash for the platform specified by a product id.

    Usage:
        cmd_ref = CommandReference(product="N9K-C9396PX", platform="nexus", cli=True)
        ref = cmd_ref.lookup("tacacs_server_host", "timeout")
    """

    def __init__(
        self,
        product: Optional[str] = None,
        platform: Optional[str] = None,
        cli: bool = False,
        files: Optional[Iterable[PathLike]] = None,
        logger: Optional[logging.Logger] = None,
        cmd_ref_dir: Optional[PathLike] = None,
    ):
        """
        Build the catalog.

        Normal usage is to pass the product only: every document in
        cmd_ref_dir is located and filtered down to those applying to
        the product. For testing (only!) an explicit list of files can
        be passed instead, which is NOT filtered by product.

        Args:
            product: Product id, matched against '/regex/' keys
            platform: Platform name, matched against filter keys
            cli: Whether CLI-only entries apply
            files: Explicit documents to load
            logger: Logger for debug output (default: module logger)
            cmd_ref_dir: Where to discover documents

        Raises:
            LoadError: If any document fails to load or resolve
        """
        self.product_id = product
        self.platform = platform
        self.cli = cli
        self.logger = logger or logging.getLogger(__name__)
        self.cmd_ref_dir = Path(cmd_ref_dir) if cmd_ref_dir else DEFAULT_CMD_REF_DIR
        self._hash: dict[str, dict[str, CommandRef]] = {}

        if files is not None:
            self.files = [Path(f) for f in files]
        else:
            self.files = discover_documents(self.cmd_ref_dir, product)

        with timed_section("cmd_ref_build", product=product, platform=platform):
            self._build()

    @classmethod
    def from_settings(
        cls,
        settings: "CatalogSettings",
        logger: Optional[logging.Logger] = None,
    ) -> "CommandReference":
        """Build a catalog from loaded CatalogSettings."""
        return cls(
            product=settings.product,
            platform=settings.platform,
            cli=settings.cli,
            files=settings.files,
            logger=logger,
            cmd_ref_dir=settings.cmd_ref_dir,
        )

    def _build(self) -> None:
        """Build the complete reference hash."""
        self.logger.debug(f"Product: {self.product_id}")
        self.logger.debug(f"Files being used: {', '.join(str(f) for f in self.files)}")

        for feature, path, document in iter_documents(self.files):
            self.logger.debug(f"Processing file '{path}' as feature '{feature}'")
            if not document:
                continue

            base_spec: dict[str, Any] = {}
            if TEMPLATE_ENTRY in document:
                try:
                    base_spec = self._merge(document[TEMPLATE_ENTRY]) or {}
                except LoadError as e:
                    raise LoadError(f"{e} for {feature}, {TEMPLATE_ENTRY} in {path}") from e

            names: dict[str, CommandRef] = {}
            for name, spec in document.items():
                if name == TEMPLATE_ENTRY:
                    continue
                if spec is None:
                    raise LoadError(f"No entries under '{name}' in '{path}'")
                try:
                    values = self._merge(spec, base_spec)
                    names[name] = CommandRef(feature, name, values, str(path))
                except LoadError as e:
                    raise LoadError(f"{e} for {feature}, {name} in {path}") from e

            # Documents with only a _template add no feature
            if names:
                self._hash.setdefault(feature, {}).update(names)

        if not self.valid():
            raise LoadError("Missing values in CommandReference.")

        self.logger.debug(
            f"Built {sum(len(n) for n in self._hash.values())} entries "
            f"for {len(self._hash)} features"
        )

    def _merge(
        self,
        spec: Any,
        base_spec: Optional[dict[str, Any]] = None,
    ) -> Optional[dict[str, Any]]:
        return hash_merge(
            spec,
            base_spec,
            product_id=self.product_id,
            platform=self.platform,
            cli=self.cli,
        )

    def lookup(self, feature: str, name: str) -> CommandRef:
        """
        Get the reference entry for a feature attribute.

        Raises:
            ResolutionError: If no entry exists for (feature, name)
        """
        try:
            return self._hash[feature][name]
        except KeyError:
            raise ResolutionError(f"No CmdRef defined for {feature}, {name}") from None

    def empty(self) -> bool:
        """Check if no entries were loaded."""
        return not self._hash

    def features(self) -> list[str]:
        """Get all feature names."""
        return list(self._hash)

    def names(self, feature: str) -> list[str]:
        """Get all entry names for a feature."""
        if feature not in self._hash:
            raise ResolutionError(f"No feature {feature} defined")
        return list(self._hash[feature])

    def valid(self) -> bool:
        """Check that every entry was built correctly."""
        complete_status = True
        for names in self._hash.values():
            for ref in names.values():
                status = ref.valid()
                if not status:
                    self.logger.debug(
                        f"Reference does not contain all supported values:\n{ref}"
                    )
                complete_status = status and complete_status
        return complete_status

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        feature, name = key
        return name in self._hash.get(feature, {})

    def __iter__(self) -> Iterator[CommandRef]:
        for names in self._hash.values():
            yield from names.values()

    def __str__(self) -> str:
        return "".join(str(ref) for ref in self)
