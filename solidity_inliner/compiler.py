"""The compiler collaborator: py-solc-x over an already-inlined source."""

import logging
import re
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import solcx
from eth_utils import add_0x_prefix, keccak
from solcx.exceptions import SolcError, SolcNotInstalled

from .config import Settings
from .errors import CompilationError
from .extraction import extract_declared_symbol_names, extract_pragma

logger = logging.getLogger(__name__)

OUTPUT_VALUES = ["abi", "bin", "bin-runtime"]

# 24KB, EIP-170
MAX_CONTRACT_SIZE = 24576

_ERROR_HEADER = re.compile(r'^\s*(?:\w+Error|Error|Warning)\b.*:', re.MULTILINE)


@dataclass
class CompiledContract:
    contract_name: str
    abi: List[Dict[str, Any]]
    bytecode: str
    runtime_bytecode: str = ""
    solc_version: str = ""
    source_hash: str = ""
    warnings: List[str] = field(default_factory=list)

    @property
    def size_bytes(self) -> int:
        return len(self.bytecode[2:]) // 2

    def to_dict(self) -> dict:
        functions = [item for item in self.abi if item.get("type") == "function"]
        events = [item for item in self.abi if item.get("type") == "event"]
        return {
            "contractName": self.contract_name,
            "abi": self.abi,
            "bytecode": self.bytecode,
            "runtimeBytecode": self.runtime_bytecode,
            "solcVersion": self.solc_version,
            "sourceHash": self.source_hash,
            "contractSizeBytes": self.size_bytes,
            "isOverSizeLimit": self.size_bytes > MAX_CONTRACT_SIZE,
            "functions": [f"{f['name']}({','.join(p['type'] for p in f.get('inputs', []))})" for f in functions],
            "events": [f"{e['name']}({','.join(p['type'] for p in e.get('inputs', []))})" for e in events],
            "warnings": self.warnings,
        }


def split_compiler_errors(output: str) -> List[str]:
    """Break solc's stderr into one message per error or warning."""
    if not output or not output.strip():
        return []
    starts = [m.start() for m in _ERROR_HEADER.finditer(output)]
    if not starts:
        return [output.strip()]
    bounds = starts + [len(output)]
    return [output[bounds[i]:bounds[i + 1]].strip() for i in range(len(starts))]


class SolcCompiler:
    """
    Compile one inlined source with solc.

    Results are memoized on the keccak hash of (version, contract name,
    source); assembly is deterministic, so equal input means equal output.
    At most ``cache_size`` results are kept, least recently used first out.
    """

    def __init__(self, settings: Optional[Settings] = None, cache_size: Optional[int] = None):
        self.settings = settings or Settings()
        self.cache_size = cache_size if cache_size is not None else self.settings.compile_cache_size
        self._cache: "OrderedDict[str, CompiledContract]" = OrderedDict()
        self._lock = threading.Lock()
        self._cache_lock = threading.Lock()

    def ensure_solc(self, source: str) -> str:
        """Make sure a suitable solc is installed and return its version."""
        with self._lock:
            if self.settings.solc_version:
                version = self.settings.solc_version
                installed = {str(v) for v in solcx.get_installed_solc_versions()}
                if version not in installed:
                    logger.info("Installing solc %s", version)
                    solcx.install_solc(version)
                return version

            pragma = extract_pragma(source)
            if pragma:
                pragma_line = f"pragma solidity {pragma};"
                try:
                    return str(solcx.set_solc_version_pragma(pragma_line, silent=True))
                except SolcNotInstalled:
                    logger.info("Installing solc for %s", pragma_line)
                    return str(solcx.install_solc_pragma(pragma_line))

            installed = solcx.get_installed_solc_versions()
            if installed:
                return str(installed[0])
            logger.info("No solc installed, installing latest")
            return str(solcx.install_solc(version="latest"))

    def compile(self, source: str, contract_name: Optional[str] = None) -> CompiledContract:
        try:
            version = self.ensure_solc(source)
        except Exception as e:
            raise CompilationError(f"Failed to setup Solidity compiler: {e}") from e

        source_hash = keccak(text=f"{version}\x00{contract_name or ''}\x00{source}").hex()
        cached = self._cached(source_hash)
        if cached is not None:
            logger.debug("Compilation cache hit %s", source_hash)
            return cached

        try:
            compiled = solcx.compile_source(
                source,
                output_values=OUTPUT_VALUES,
                solc_version=version,
                optimize=self.settings.optimize,
                optimize_runs=self.settings.optimize_runs if self.settings.optimize else None,
            )
        except SolcError as e:
            errors = split_compiler_errors(e.stderr_data or "") or [e.message]
            logger.warning("Compilation failed with %d error(s)", len(errors))
            raise CompilationError("Compilation failed", errors) from e

        contract_id = self._select_contract(compiled, source, contract_name)
        interface = compiled[contract_id]
        result = CompiledContract(
            contract_name=contract_id.split(":")[-1],
            abi=interface["abi"],
            bytecode=add_0x_prefix(interface.get("bin", "")),
            runtime_bytecode=add_0x_prefix(interface.get("bin-runtime", "")),
            solc_version=version,
            source_hash=add_0x_prefix(source_hash),
        )
        self._store(source_hash, result)
        return result

    def _cached(self, key: str) -> Optional[CompiledContract]:
        with self._cache_lock:
            result = self._cache.get(key)
            if result is not None:
                self._cache.move_to_end(key)
            return result

    def _store(self, key: str, result: CompiledContract) -> None:
        with self._cache_lock:
            self._cache[key] = result
            self._cache.move_to_end(key)
            while len(self._cache) > self.cache_size:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug("Evicted compilation %s", evicted)

    @staticmethod
    def _select_contract(compiled: Dict[str, Any], source: str, contract_name: Optional[str]) -> str:
        if not compiled:
            raise CompilationError("Compiler produced no contracts")

        by_name = {key.split(":")[-1]: key for key in compiled}
        if contract_name:
            name = contract_name[:-4] if contract_name.endswith(".sol") else contract_name
            if name in by_name:
                return by_name[name]
            raise CompilationError(f"Contract {name} not found in compiled output")

        # the main contract is declared last; skip abstract ones and interfaces
        for name in reversed(extract_declared_symbol_names(source)):
            key = by_name.get(name)
            if key is not None and compiled[key].get("bin"):
                return key
        return next(iter(compiled))
