import json

import pytest

from contract_agent import contract_utils
from contract_agent.agent import root_agent
from contract_agent.contract_helpers import (
    get_dependency_tree,
    handle_compilation_errors,
    list_standard_library,
)
from contract_agent.contract_utils import (
    clean_contract_code,
    compile_contract,
    resolve_contract_imports,
)
from solidity_inliner.compiler import CompiledContract
from solidity_inliner.errors import CompilationError

FOO = """Here is your contract:

```solidity
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;
import "@openzeppelin/contracts/access/Ownable.sol";
contract Foo is Ownable {}
```
"""


class FakeCompiler:
    def __init__(self, error=None):
        self.error = error

    def compile(self, source, contract_name=None):
        if self.error is not None:
            raise self.error
        return CompiledContract(contract_name or "Foo", [], "0x6080")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SOLIDITY_DEPENDENCY_ROOT", "SOLIDITY_MAX_DEPTH", "SOLC_VERSION"):
        monkeypatch.delenv(name, raising=False)


def test_agent_exposes_tools():
    assert root_agent.name == "solidity_copilot"
    for tool in (clean_contract_code, resolve_contract_imports, compile_contract, get_dependency_tree):
        assert tool in root_agent.tools


def test_clean_contract_code():
    result = clean_contract_code(FOO)
    assert result["status"] == "success"
    data = result["data"]
    assert data["cleaned_code"].startswith("// SPDX-License-Identifier: MIT")
    assert data["imports"] == ["@openzeppelin/contracts/access/Ownable.sol"]
    assert data["cleaned_length"] < data["original_length"]


def test_clean_contract_code_empty():
    assert clean_contract_code("")["status"] == "error"


def test_resolve_contract_imports():
    result = resolve_contract_imports(FOO)
    assert result["status"] == "success"
    data = result["data"]
    assert data["inlined_dependencies"] == [
        "../utils/Context.sol",
        "@openzeppelin/contracts/access/Ownable.sol",
    ]
    assert data["dependency_count"] == 2
    assert data["has_warnings"] is False
    assert data["resolved_code"].count("pragma solidity") == 1


def test_resolve_contract_imports_invalid():
    result = resolve_contract_imports("   ")
    assert result["status"] == "error"
    assert result["error_type"] == "invalid_source"


def test_compile_contract(monkeypatch):
    monkeypatch.setattr(contract_utils, "_get_compiler", lambda: FakeCompiler())
    result = compile_contract(FOO, "Foo")
    assert result["status"] == "success"
    assert result["data"]["contractName"] == "Foo"
    assert result["data"]["inlined_dependencies"][-1] == "@openzeppelin/contracts/access/Ownable.sol"


@pytest.mark.parametrize(
    "message, error_type",
    [
        ("ParserError: Expected ';' but got '}'", "syntax_error"),
        ("TypeError: Member not found", "type_error"),
        ("DeclarationError: Identifier not found or not unique.", "declaration_error"),
        ("solc crashed", "compilation_error"),
    ],
)
def test_compile_contract_error_types(monkeypatch, message, error_type):
    failing = FakeCompiler(CompilationError("Compilation failed", [message]))
    monkeypatch.setattr(contract_utils, "_get_compiler", lambda: failing)
    result = compile_contract(FOO)
    assert result["status"] == "error"
    assert result["error_type"] == error_type
    assert result["errors"] == [message]


def test_get_dependency_tree():
    code = 'pragma solidity ^0.8.0;\nimport "./Ownable.sol";\nimport "./Nope.sol";\ncontract A {}'
    result = get_dependency_tree(code)
    assert result["status"] == "success"
    assert result["data"]["missing_imports"] == ["./Nope.sol"]
    assert result["data"]["is_fully_resolvable"] is False


def test_list_standard_library():
    data = list_standard_library()["data"]
    assert data["total_count"] == len(data["entries"])
    assert any(entry["name"] == "ERC20" for entry in data["entries"])


def test_handle_compilation_errors():
    errors = [
        "ParserError: Expected ';' but got '}'\n --> <stdin>:12:5:",
        "DeclarationError: Identifier already declared.",
        "Warning: Unused local variable.",
    ]
    data = handle_compilation_errors(json.dumps(errors))["data"]
    assert data["total_errors"] == 2
    assert data["error_types"] == ["declaration_error", "syntax_error", "warning"]
    assert data["parsed_errors"][0]["line_number"] == 12
    assert "remove one of the imports" in data["parsed_errors"][1]["suggestion"]
    assert len(data["general_suggestions"]) == 2


def test_handle_compilation_errors_single_string():
    data = handle_compilation_errors("TypeError: Type is not compatible")["data"]
    assert data["parsed_errors"][0]["error_type"] == "type_error"


def test_handle_compilation_errors_bad_input():
    assert handle_compilation_errors(json.dumps(42))["status"] == "error"
