import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from .errors import ConfigurationError

DEFAULT_MAX_DEPTH = 50
DEFAULT_LICENSE = "MIT"
DEFAULT_PRAGMA = "^0.8.0"
DEFAULT_OPTIMIZE_RUNS = 200
DEFAULT_COMPILE_CACHE_SIZE = 128


def _parse_origins(value: Optional[str]) -> List[str]:
    if not value:
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


def _parse_flag(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_int(name: str, value: Optional[str], default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if parsed < 1:
        raise ConfigurationError(f"{name} must be positive, got {parsed}")
    return parsed


@dataclass(frozen=True)
class Settings:
    """Runtime settings for resolution and compilation."""

    dependency_root: Optional[Path] = None
    max_depth: int = DEFAULT_MAX_DEPTH
    default_license: str = DEFAULT_LICENSE
    default_pragma: str = DEFAULT_PRAGMA
    solc_version: Optional[str] = None
    optimize: bool = True
    optimize_runs: int = DEFAULT_OPTIMIZE_RUNS
    compile_cache_size: int = DEFAULT_COMPILE_CACHE_SIZE
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ

        root = env.get("SOLIDITY_DEPENDENCY_ROOT")
        return cls(
            dependency_root=Path(root).expanduser() if root else None,
            max_depth=_parse_int("SOLIDITY_MAX_DEPTH", env.get("SOLIDITY_MAX_DEPTH"), DEFAULT_MAX_DEPTH),
            default_license=env.get("SOLIDITY_DEFAULT_LICENSE") or DEFAULT_LICENSE,
            default_pragma=env.get("SOLIDITY_DEFAULT_PRAGMA") or DEFAULT_PRAGMA,
            solc_version=env.get("SOLC_VERSION") or None,
            optimize=_parse_flag(env.get("SOLC_OPTIMIZE"), True),
            optimize_runs=_parse_int("SOLC_OPTIMIZE_RUNS", env.get("SOLC_OPTIMIZE_RUNS"), DEFAULT_OPTIMIZE_RUNS),
            compile_cache_size=_parse_int(
                "SOLC_CACHE_SIZE", env.get("SOLC_CACHE_SIZE"), DEFAULT_COMPILE_CACHE_SIZE
            ),
            allowed_origins=_parse_origins(env.get("ALLOWED_ORIGINS")),
        )
