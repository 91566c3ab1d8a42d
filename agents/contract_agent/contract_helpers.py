# =============================================================================
# DEPENDENCY INSPECTION AND ERROR HANDLING
# =============================================================================

import re
import json
from typing import Dict, Any, List

from solidity_inliner import Settings, default_library, dependency_tree, normalize
from solidity_inliner.pipeline import build_lookup


def get_dependency_tree(contract_code: str) -> Dict[str, Any]:
    """Show which imports a contract pulls in, and which of them cannot be found."""
    try:
        settings = Settings.from_env()
        tree = dependency_tree(normalize(contract_code), build_lookup(settings), max_depth=settings.max_depth)

        missing: List[str] = []
        circular: List[str] = []

        def walk(node: Dict[str, Any]) -> None:
            for child in node.get("imports", []):
                if child.get("error"):
                    missing.append(child["path"])
                elif child.get("circular"):
                    circular.append(child["path"])
                else:
                    walk(child)

        walk(tree)
        return {
            "status": "success",
            "data": {
                "tree": tree,
                "missing_imports": sorted(set(missing)),
                "circular_imports": sorted(set(circular)),
                "is_fully_resolvable": not missing
            }
        }
    except Exception as e:
        return {"status": "error", "error_message": f"Dependency analysis failed: {str(e)}"}


def list_standard_library() -> Dict[str, Any]:
    """Return the dependencies that can be inlined without network access."""
    entries = [entry.to_dict() for entry in default_library()]
    return {"status": "success", "data": {"entries": entries, "total_count": len(entries)}}


def handle_compilation_errors(errors_json: str) -> Dict[str, Any]:
    """Parse compiler errors and suggest fixes."""
    try:
        errors = errors_json
        if isinstance(errors_json, str):
            try:
                errors = json.loads(errors_json)
            except json.JSONDecodeError:
                # a raw compiler message rather than a JSON list
                errors = errors_json
        if isinstance(errors, str):
            errors = [errors]

        parsed_errors = []
        suggestions = []

        for error in errors:
            error_info = {
                "original_error": error,
                "error_type": "unknown",
                "line_number": None,
                "suggestion": "Check the error message for details"
            }

            # Parse line numbers, e.g. "--> <stdin>:12:5:"
            line_match = re.search(r':(\d+):', error)
            if line_match:
                error_info["line_number"] = int(line_match.group(1))

            # Categorize common errors
            if "ParserError" in error:
                error_info["error_type"] = "syntax_error"
                if "Expected" in error:
                    error_info["suggestion"] = "Check syntax - missing semicolon, bracket, or parenthesis"
                elif "Unexpected" in error:
                    error_info["suggestion"] = "Remove unexpected character or check syntax"

            elif "DeclarationError" in error:
                error_info["error_type"] = "declaration_error"
                if "already declared" in error:
                    error_info["suggestion"] = "Two inlined dependencies declare the same name - remove one of the imports"
                elif "not found" in error or "not declared" in error:
                    error_info["suggestion"] = "Identifier comes from an import that could not be resolved - check the resolution diagnostics"

            elif "TypeError" in error:
                error_info["error_type"] = "type_error"
                if "not found" in error:
                    error_info["suggestion"] = "Check if variable/function is declared and spelled correctly"
                elif "not compatible" in error:
                    error_info["suggestion"] = "Check data types - ensure compatible types for assignment/comparison"
                elif "not callable" in error:
                    error_info["suggestion"] = "Check if you're trying to call a variable as a function"

            elif "Source file requires different compiler version" in error:
                error_info["error_type"] = "version_error"
                error_info["suggestion"] = "Adjust the pragma or set SOLC_VERSION to a matching compiler"

            elif "Warning" in error:
                error_info["error_type"] = "warning"
                if "unused" in error.lower():
                    error_info["suggestion"] = "Remove unused variables or prefix with underscore"

            parsed_errors.append(error_info)

        error_types = [e["error_type"] for e in parsed_errors]

        if "syntax_error" in error_types:
            suggestions.append("Review code syntax carefully - check for missing semicolons, brackets, and parentheses")
        if "declaration_error" in error_types:
            suggestions.append("Make sure every imported contract is in the standard library or the dependency root")
        if "type_error" in error_types:
            suggestions.append("Verify all variable types and function signatures match their usage")

        return {
            "status": "success",
            "data": {
                "parsed_errors": parsed_errors,
                "total_errors": len([e for e in parsed_errors if e["error_type"] != "warning"]),
                "error_types": sorted(set(error_types)),
                "general_suggestions": suggestions
            }
        }

    except Exception as e:
        return {"status": "error", "error_message": f"Error parsing failed: {str(e)}"}
