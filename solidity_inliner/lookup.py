"""The ``lookup(path) -> str | None`` callable used by the resolver."""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Union

from .standard_library import StandardLibrary, canonical_import_path, default_library

logger = logging.getLogger(__name__)

Lookup = Callable[[str], Optional[str]]


class DependencyLookup:
    """
    Resolve an import path to source text.

    The standard-library table is consulted first; if it has no entry the
    path is read as a ``.sol`` file relative to ``dependency_root``. Any
    failure along the way means "not found", never an exception.
    """

    def __init__(
        self,
        library: Optional[StandardLibrary] = None,
        dependency_root: Optional[Union[str, Path]] = None,
    ):
        self.library = library if library is not None else default_library()
        self.dependency_root = Path(dependency_root) if dependency_root else None

    def __call__(self, path: str) -> Optional[str]:
        source = self.library.get(path)
        if source is not None:
            return source
        return self.read_local(path)

    def _candidates(self, path: str) -> List[Path]:
        relative = canonical_import_path(path)
        candidates = [self.dependency_root / relative]
        if "/" not in relative:
            candidates.append(self.dependency_root / "utils" / relative)
        return candidates

    def read_local(self, path: str) -> Optional[str]:
        if self.dependency_root is None:
            return None
        if "://" in path or not path.endswith(".sol"):
            return None

        try:
            root = self.dependency_root.resolve()
        except OSError as e:
            logger.debug("Dependency root %s is unusable: %s", self.dependency_root, e)
            return None

        for candidate in self._candidates(path):
            try:
                resolved = candidate.resolve()
                resolved.relative_to(root)
            except (OSError, ValueError):
                logger.debug("Skipping %s: outside dependency root", candidate)
                continue
            if not resolved.is_file():
                continue
            try:
                return resolved.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.debug("Could not read %s: %s", resolved, e)
        return None
