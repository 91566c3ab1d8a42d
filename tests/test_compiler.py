import pytest
import solcx
from solcx.exceptions import SolcError, SolcNotInstalled

from solidity_inliner.compiler import CompiledContract, SolcCompiler, split_compiler_errors
from solidity_inliner.config import Settings
from solidity_inliner.errors import CompilationError

SOURCE = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

abstract contract Context {}

contract Foo is Context {
    event Stored(uint256 value);
    function set(uint256 value) public {}
}
"""

ABI = [
    {"type": "function", "name": "set", "inputs": [{"name": "value", "type": "uint256"}], "outputs": []},
    {"type": "event", "name": "Stored", "inputs": [{"name": "value", "type": "uint256"}]},
]

OUTPUT = {
    "<stdin>:Context": {"abi": [], "bin": "", "bin-runtime": ""},
    "<stdin>:Foo": {"abi": ABI, "bin": "6080", "bin-runtime": "6080"},
}

STDERR = """ParserError: Expected ';' but got '}'
 --> <stdin>:5:1:
  |
5 | }
  | ^

DeclarationError: Undeclared identifier.
 --> <stdin>:9:9:
"""


class FakeSolc:
    def __init__(self, output=None, error=None):
        self.output = output if output is not None else OUTPUT
        self.error = error
        self.calls = []

    def __call__(self, source, **kwargs):
        self.calls.append((source, kwargs))
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def fake_solc(monkeypatch):
    fake = FakeSolc()
    monkeypatch.setattr(solcx, "compile_source", fake)
    monkeypatch.setattr(solcx, "get_installed_solc_versions", lambda: ["0.8.19"])
    return fake


@pytest.fixture
def compiler(fake_solc):
    return SolcCompiler(Settings(solc_version="0.8.19"))


def test_split_compiler_errors():
    errors = split_compiler_errors(STDERR)
    assert len(errors) == 2
    assert errors[0].startswith("ParserError: Expected ';'")
    assert "<stdin>:5:1" in errors[0]
    assert errors[1].startswith("DeclarationError: Undeclared identifier.")


def test_split_compiler_errors_edge_cases():
    assert split_compiler_errors("") == []
    assert split_compiler_errors("solc crashed") == ["solc crashed"]


def test_compile_picks_last_concrete_contract(compiler, fake_solc):
    compiled = compiler.compile(SOURCE)
    assert compiled.contract_name == "Foo"
    assert compiled.bytecode == "0x6080"
    assert compiled.runtime_bytecode == "0x6080"
    assert compiled.solc_version == "0.8.19"
    assert compiled.source_hash.startswith("0x")

    _, kwargs = fake_solc.calls[0]
    assert kwargs["solc_version"] == "0.8.19"
    assert kwargs["output_values"] == ["abi", "bin", "bin-runtime"]
    assert kwargs["optimize"] is True
    assert kwargs["optimize_runs"] == 200


def test_to_dict(compiler):
    data = compiler.compile(SOURCE).to_dict()
    assert data["contractName"] == "Foo"
    assert data["functions"] == ["set(uint256)"]
    assert data["events"] == ["Stored(uint256)"]
    assert data["contractSizeBytes"] == 2
    assert data["isOverSizeLimit"] is False


def test_oversized_contract():
    compiled = CompiledContract("Big", [], "0x" + "00" * 24577)
    assert compiled.to_dict()["isOverSizeLimit"] is True


def test_explicit_contract_name(compiler):
    assert compiler.compile(SOURCE, "Context.sol").contract_name == "Context"
    with pytest.raises(CompilationError):
        compiler.compile(SOURCE, "Missing")


def test_results_are_cached(compiler, fake_solc):
    first = compiler.compile(SOURCE)
    second = compiler.compile(SOURCE)
    assert first is second
    assert len(fake_solc.calls) == 1
    compiler.compile(SOURCE, "Foo")
    assert len(fake_solc.calls) == 2


def test_solc_error_becomes_compilation_error(compiler, fake_solc):
    fake_solc.error = SolcError(
        message="solc returned an error",
        command=["solc"],
        return_code=1,
        stdin_data=SOURCE,
        stdout_data="",
        stderr_data=STDERR,
    )
    with pytest.raises(CompilationError) as excinfo:
        compiler.compile(SOURCE)
    assert str(excinfo.value) == "Compilation failed"
    assert len(excinfo.value.errors) == 2
    assert excinfo.value.errors[0].startswith("ParserError")


def test_installs_configured_version(monkeypatch, fake_solc):
    installed = []
    monkeypatch.setattr(solcx, "get_installed_solc_versions", lambda: [])
    monkeypatch.setattr(solcx, "install_solc", lambda version: installed.append(version))
    SolcCompiler(Settings(solc_version="0.8.24")).compile(SOURCE)
    assert installed == ["0.8.24"]


def test_version_from_pragma(monkeypatch, fake_solc):
    seen = []

    def set_version(pragma_string, silent=False):
        seen.append(pragma_string)
        return "0.8.20"

    monkeypatch.setattr(solcx, "set_solc_version_pragma", set_version)
    compiled = SolcCompiler(Settings()).compile(SOURCE)
    assert seen == ["pragma solidity ^0.8.0;"]
    assert compiled.solc_version == "0.8.20"
    assert fake_solc.calls[0][1]["solc_version"] == "0.8.20"


def test_installs_version_for_pragma(monkeypatch, fake_solc):
    def not_installed(pragma_string, silent=False):
        raise SolcNotInstalled("no match")

    monkeypatch.setattr(solcx, "set_solc_version_pragma", not_installed)
    monkeypatch.setattr(solcx, "install_solc_pragma", lambda pragma_string: "0.8.21")
    assert SolcCompiler(Settings()).compile(SOURCE).solc_version == "0.8.21"


def test_setup_failure(monkeypatch, fake_solc):
    def broken():
        raise RuntimeError("network down")

    monkeypatch.setattr(solcx, "get_installed_solc_versions", broken)
    with pytest.raises(CompilationError) as excinfo:
        SolcCompiler(Settings(solc_version="0.8.19")).compile(SOURCE)
    assert "Failed to setup Solidity compiler" in str(excinfo.value)
    assert fake_solc.calls == []


def test_cache_evicts_least_recently_used(fake_solc):
    compiler = SolcCompiler(Settings(solc_version="0.8.19"), cache_size=2)
    first, second, third = (SOURCE + f"// build {n}\n" for n in range(3))

    compiler.compile(first)
    compiler.compile(second)
    compiler.compile(first)
    compiler.compile(third)
    assert len(fake_solc.calls) == 3

    compiler.compile(first)
    assert len(fake_solc.calls) == 3
    compiler.compile(second)
    assert len(fake_solc.calls) == 4
    assert len(compiler._cache) == 2


def test_cache_size_from_settings(fake_solc):
    assert SolcCompiler(Settings(compile_cache_size=5)).cache_size == 5
