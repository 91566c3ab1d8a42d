"""Normalizer -> Resolver -> Assembler."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .assembler import assemble
from .config import Settings
from .errors import InvalidSourceError
from .extraction import LICENSE_MARKER, has_imports
from .lookup import DependencyLookup, Lookup
from .normalizer import normalize
from .resolver import ROOT_PATH, Diagnostic, DiagnosticKind, DependencyResolver, SourceUnit

logger = logging.getLogger(__name__)


@dataclass
class PreparedSource:
    """A compilable source string plus everything noticed while building it."""

    source: str
    diagnostics: List[Diagnostic] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    has_imports: bool = False

    @property
    def messages(self) -> List[str]:
        return [d.message for d in self.diagnostics]

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "diagnostics": self.messages,
            "details": [d.to_dict() for d in self.diagnostics],
            "dependencies": self.dependencies,
            "hasImports": self.has_imports,
        }


def build_lookup(settings: Settings) -> DependencyLookup:
    return DependencyLookup(dependency_root=settings.dependency_root)


def prepare_for_compilation(
    text: str,
    lookup: Optional[Lookup] = None,
    settings: Optional[Settings] = None,
) -> PreparedSource:
    """
    Turn raw model output or pasted code into one self-contained source.

    Raises ``InvalidSourceError`` when ``text`` is not a string or holds no
    code. Every other problem is reported in ``diagnostics``.
    """
    if not isinstance(text, str):
        raise InvalidSourceError(f"Contract code must be a string, got {type(text).__name__}")

    settings = settings or Settings()
    lookup = lookup if lookup is not None else build_lookup(settings)

    normalized = normalize(text)
    if not normalized:
        raise InvalidSourceError("Contract code is empty")

    header_diagnostics = []
    if not normalized.startswith("pragma") and not LICENSE_MARKER.match(normalized):
        message = "no pragma or SPDX license found; defaults will be used"
        logger.warning(message)
        header_diagnostics.append(Diagnostic(DiagnosticKind.MISSING_HEADER, ROOT_PATH, message))

    root = SourceUnit(ROOT_PATH, normalized)
    result = DependencyResolver(lookup, max_depth=settings.max_depth).resolve(root)
    source = assemble(
        root,
        result.dependencies,
        default_license=settings.default_license,
        default_pragma=settings.default_pragma,
    )

    logger.debug("Prepared source with %d inlined dependencies", len(result.dependencies))
    return PreparedSource(
        source=source,
        diagnostics=header_diagnostics + result.diagnostics,
        dependencies=result.dependencies.paths,
        has_imports=has_imports(normalized),
    )
