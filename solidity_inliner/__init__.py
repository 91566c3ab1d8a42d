"""
Flatten Solidity sources for compilation.

Normalize model output, resolve imports against a built-in table or a local
dependency root, and assemble one self-contained file.
"""

from .assembler import assemble
from .config import Settings
from .errors import CompilationError, ConfigurationError, InvalidSourceError, SolidityInlinerError
from .lookup import DependencyLookup
from .normalizer import extract_code_blocks, normalize
from .pipeline import PreparedSource, prepare_for_compilation
from .resolver import (
    Diagnostic,
    DiagnosticKind,
    DependencyResolver,
    DependencySet,
    ResolutionContext,
    ResolutionResult,
    SourceUnit,
    dependency_tree,
    resolve,
)
from .standard_library import LibraryEntry, StandardLibrary, default_library

__all__ = [
    'assemble',
    'normalize',
    'extract_code_blocks',
    'resolve',
    'dependency_tree',
    'prepare_for_compilation',
    'PreparedSource',
    'Settings',
    'DependencyLookup',
    'DependencyResolver',
    'DependencySet',
    'ResolutionContext',
    'ResolutionResult',
    'SourceUnit',
    'Diagnostic',
    'DiagnosticKind',
    'LibraryEntry',
    'StandardLibrary',
    'default_library',
    'SolidityInlinerError',
    'InvalidSourceError',
    'ConfigurationError',
    'CompilationError',
]
