"""
Recursive import resolution.

Given a root ``SourceUnit`` and a ``lookup`` callable, walk every import
depth first and collect the dependencies the root needs, flattened (their own
imports removed) and ordered so that a dependency always precedes the units
that import it.

Resolution is total: a missing import, a cycle, a duplicate declaration or a
too-deep chain becomes a ``Diagnostic`` and resolution carries on. Only a
malformed root raises.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterator, List, Optional, Set, Tuple

from .config import DEFAULT_MAX_DEPTH
from .errors import InvalidSourceError
from .extraction import extract_declared_symbol_names, extract_import_paths, strip_imports
from .lookup import Lookup

logger = logging.getLogger(__name__)

ROOT_PATH = "root"


class DiagnosticKind(Enum):
    UNRESOLVED_IMPORT = "unresolved_import"
    CYCLIC_IMPORT = "cyclic_import"
    DUPLICATE_SYMBOL = "duplicate_symbol"
    MAX_DEPTH_EXCEEDED = "max_depth_exceeded"
    MISSING_HEADER = "missing_header"


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal resolution anomaly."""

    kind: DiagnosticKind
    path: str
    message: str
    importer: Optional[str] = None
    severity: str = "warning"

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict:
        result = {
            "kind": self.kind.value,
            "path": self.path,
            "message": self.message,
            "severity": self.severity,
        }
        if self.importer is not None:
            result["importer"] = self.importer
        return result


@dataclass
class SourceUnit:
    """A named chunk of Solidity text."""

    path: str
    raw_text: str
    declared_symbols: FrozenSet[str] = field(init=False)

    def __post_init__(self):
        self.declared_symbols = frozenset(extract_declared_symbol_names(self.raw_text or ""))


class DependencySet:
    """Resolved units keyed by import path; insertion order, first one wins."""

    def __init__(self):
        self._units: "OrderedDict[str, SourceUnit]" = OrderedDict()

    def add(self, unit: SourceUnit) -> bool:
        if unit.path in self._units:
            return False
        self._units[unit.path] = unit
        return True

    def get(self, path: str) -> Optional[SourceUnit]:
        return self._units.get(path)

    @property
    def paths(self) -> List[str]:
        return list(self._units)

    def __contains__(self, path: object) -> bool:
        return path in self._units

    def __iter__(self) -> Iterator[SourceUnit]:
        return iter(self._units.values())

    def __len__(self) -> int:
        return len(self._units)


@dataclass
class ResolutionContext:
    """Mutable state for a single ``resolve`` call. Never shared."""

    visiting: Set[str] = field(default_factory=set)
    resolved_cache: Dict[str, Optional[str]] = field(default_factory=dict)
    included_symbols: Set[str] = field(default_factory=set)
    dependencies: DependencySet = field(default_factory=DependencySet)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def report(
        self,
        kind: DiagnosticKind,
        path: str,
        message: str,
        importer: Optional[str] = None,
        severity: str = "warning",
    ) -> None:
        diagnostic = Diagnostic(kind, path, message, importer=importer, severity=severity)
        self.diagnostics.append(diagnostic)
        if severity == "info":
            logger.info(message)
        else:
            logger.warning(message)


@dataclass
class ResolutionResult:
    dependencies: DependencySet
    diagnostics: List[Diagnostic]

    @property
    def messages(self) -> List[str]:
        return [d.message for d in self.diagnostics]


class DependencyResolver:
    """
    Depth-first resolver over an injected ``lookup``.

    The first traversal that reaches a path owns its inlining; later reaches
    through a cycle are skipped with a diagnostic.
    """

    def __init__(self, lookup: Lookup, max_depth: int = DEFAULT_MAX_DEPTH):
        if max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {max_depth}")
        self.lookup = lookup
        self.max_depth = max_depth

    def resolve(self, root: SourceUnit) -> ResolutionResult:
        if root is None or not isinstance(root.raw_text, str) or not root.raw_text.strip():
            raise InvalidSourceError("Root contract source is empty")

        context = ResolutionContext()
        context.visiting.add(root.path)
        # the main contract's own declarations take precedence over any inlined copy
        context.included_symbols.update(root.declared_symbols)

        self._resolve_unit(root, context, depth=0)
        return ResolutionResult(dependencies=context.dependencies, diagnostics=context.diagnostics)

    def _resolve_unit(self, unit: SourceUnit, context: ResolutionContext, depth: int) -> None:
        for import_path in extract_import_paths(unit.raw_text):
            if import_path in context.visiting:
                context.report(
                    DiagnosticKind.CYCLIC_IMPORT,
                    import_path,
                    f"circular import skipped: `{import_path}` imported from `{unit.path}`",
                    importer=unit.path,
                )
                continue

            if import_path in context.resolved_cache:
                logger.debug("Reusing resolved import %s", import_path)
                continue

            if depth >= self.max_depth:
                context.report(
                    DiagnosticKind.MAX_DEPTH_EXCEEDED,
                    import_path,
                    f"maximum import depth {self.max_depth} exceeded at `{import_path}`",
                    importer=unit.path,
                )
                continue

            text = self.lookup(import_path)
            if text is None:
                context.resolved_cache[import_path] = None
                context.report(
                    DiagnosticKind.UNRESOLVED_IMPORT,
                    import_path,
                    f"unresolved import: `{import_path}`",
                    importer=unit.path,
                )
                continue

            context.visiting.add(import_path)
            try:
                self._resolve_unit(SourceUnit(import_path, text), context, depth + 1)
            finally:
                context.visiting.discard(import_path)

            flattened = strip_imports(text)
            context.resolved_cache[import_path] = flattened
            self._include(SourceUnit(import_path, flattened), context)

    def _include(self, unit: SourceUnit, context: ResolutionContext) -> None:
        duplicates = unit.declared_symbols & context.included_symbols
        if duplicates:
            names = ", ".join(sorted(duplicates))
            same_source = any(
                included.raw_text.strip() == unit.raw_text.strip()
                for included in context.dependencies
            )
            context.report(
                DiagnosticKind.DUPLICATE_SYMBOL,
                unit.path,
                f"duplicate definition of {names} from `{unit.path}` dropped",
                # an alias of something already inlined is expected, not suspicious
                severity="info" if same_source else "warning",
            )
            return

        context.included_symbols.update(unit.declared_symbols)
        context.dependencies.add(unit)


def resolve(root: SourceUnit, lookup: Lookup, max_depth: int = DEFAULT_MAX_DEPTH) -> ResolutionResult:
    return DependencyResolver(lookup, max_depth=max_depth).resolve(root)


def dependency_tree(text: str, lookup: Lookup, max_depth: int = DEFAULT_MAX_DEPTH) -> dict:
    """
    Describe the import graph of ``text`` as nested dicts, for debugging.

    Each node is ``{"path": ..., "imports": [...]}``; unresolved leaves carry
    ``"error": "not found"`` and back edges ``"circular": True``. A dependency reached along
    several paths is expanded once and shared between its importers.
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidSourceError("Root contract source is empty")

    # finished subtrees by import path; only those with no back edge or depth
    # cutoff, since both depend on the path taken to reach them
    subtrees: Dict[str, dict] = {}

    def build(path: str, source: str, stack: List[str]) -> Tuple[dict, bool]:
        node = {"path": path, "imports": []}
        complete = True
        for import_path in extract_import_paths(source):
            if import_path in subtrees:
                node["imports"].append(subtrees[import_path])
                continue
            if import_path in stack:
                node["imports"].append({"path": import_path, "circular": True})
                complete = False
                continue
            if len(stack) > max_depth:
                node["imports"].append({"path": import_path, "error": "max depth exceeded"})
                complete = False
                continue
            dependency = lookup(import_path)
            if dependency is None:
                subtrees[import_path] = {"path": import_path, "error": "not found"}
                node["imports"].append(subtrees[import_path])
                continue
            child, child_complete = build(import_path, dependency, stack + [import_path])
            complete = complete and child_complete
            node["imports"].append(child)
        if complete:
            subtrees[path] = node
        return node, complete

    return build(ROOT_PATH, text, [ROOT_PATH])[0]
