# =============================================================================
# RESOLUTION AND COMPILATION FUNCTIONS
# =============================================================================

import logging
from typing import Dict, Any, Optional

from solidity_inliner import (
    CompilationError,
    InvalidSourceError,
    Settings,
    normalize,
    prepare_for_compilation,
)
from solidity_inliner.compiler import SolcCompiler
from solidity_inliner.extraction import extract_import_paths

logger = logging.getLogger(__name__)

_compiler: Optional[SolcCompiler] = None


def _get_compiler() -> SolcCompiler:
    global _compiler
    if _compiler is None:
        _compiler = SolcCompiler(Settings.from_env())
    return _compiler


def clean_contract_code(contract_code: str) -> Dict[str, Any]:
    """Strip markdown fences and leading prose from generated Solidity code."""
    try:
        cleaned = normalize(contract_code)
        if not cleaned:
            return {"status": "error", "error_message": "No contract code provided"}

        imports = extract_import_paths(cleaned)
        return {
            "status": "success",
            "data": {
                "cleaned_code": cleaned,
                "has_imports": bool(imports),
                "imports": imports,
                "original_length": len(contract_code or ""),
                "cleaned_length": len(cleaned)
            }
        }
    except Exception as e:
        return {"status": "error", "error_message": f"Code cleaning failed: {str(e)}"}


def resolve_contract_imports(contract_code: str) -> Dict[str, Any]:
    """Inline every import so the contract compiles without a package manager."""
    try:
        prepared = prepare_for_compilation(contract_code, settings=Settings.from_env())
        return {
            "status": "success",
            "data": {
                "resolved_code": prepared.source,
                "inlined_dependencies": prepared.dependencies,
                "dependency_count": len(prepared.dependencies),
                "diagnostics": prepared.messages,
                "has_warnings": any(d.severity == "warning" for d in prepared.diagnostics)
            }
        }
    except InvalidSourceError as e:
        return {"status": "error", "error_type": "invalid_source", "error_message": str(e)}
    except Exception as e:
        return {"status": "error", "error_message": f"Import resolution failed: {str(e)}"}


def compile_contract(contract_code: str, contract_name: str = "") -> Dict[str, Any]:
    """Resolve imports, then use py-solc-x to compile and return ABI and bytecode."""
    try:
        prepared = prepare_for_compilation(contract_code, settings=Settings.from_env())
    except InvalidSourceError as e:
        return {"status": "error", "error_type": "invalid_source", "error_message": str(e)}

    try:
        compiled = _get_compiler().compile(prepared.source, contract_name or None)
    except CompilationError as e:
        error_msg = "\n".join(e.errors)

        # Parse common compilation errors
        if "ParserError" in error_msg:
            error_type = "syntax_error"
        elif "TypeError" in error_msg:
            error_type = "type_error"
        elif "DeclarationError" in error_msg:
            error_type = "declaration_error"
        else:
            error_type = "compilation_error"

        return {
            "status": "error",
            "error_type": error_type,
            "error_message": f"Compilation failed: {error_msg}",
            "errors": e.errors,
            "diagnostics": prepared.messages
        }
    except Exception as e:
        logger.exception("Unexpected compiler failure")
        return {"status": "error", "error_type": "compilation_error", "error_message": f"Compilation failed: {str(e)}"}

    data = compiled.to_dict()
    data["diagnostics"] = prepared.messages
    data["inlined_dependencies"] = prepared.dependencies
    return {"status": "success", "data": data}
