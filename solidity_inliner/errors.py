"""Exceptions raised by the inliner and its compiler collaborator."""

from typing import List, Optional


class SolidityInlinerError(Exception):
    """Base class for every error raised by this package."""


class InvalidSourceError(SolidityInlinerError, ValueError):
    """The root contract text is empty or not a string."""


class ConfigurationError(SolidityInlinerError):
    """An environment setting could not be parsed."""


class CompilationError(SolidityInlinerError):
    """The Solidity compiler rejected the assembled source."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or [message]
