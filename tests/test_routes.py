import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from solidity_inliner.compiler import CompiledContract
from solidity_inliner.config import Settings
from solidity_inliner.errors import CompilationError
from solidity_inliner.routes import get_compiler, get_settings, router
from solidity_inliner.standard_library import default_library

FOO = """```solidity
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;
import "./Ownable.sol";
contract Foo is Ownable { constructor() Ownable() {} }
```"""


class FakeCompiler:
    def __init__(self):
        self.calls = []
        self.error = None

    def compile(self, source, contract_name=None):
        self.calls.append((source, contract_name))
        if self.error is not None:
            raise self.error
        return CompiledContract(
            contract_name="Foo",
            abi=[{"type": "function", "name": "owner", "inputs": [], "outputs": []}],
            bytecode="0x6080",
            runtime_bytecode="0x6080",
            solc_version="0.8.19",
        )


@pytest.fixture
def compiler():
    return FakeCompiler()


@pytest.fixture
def client(compiler):
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_settings] = lambda: Settings()
    app.dependency_overrides[get_compiler] = lambda: compiler
    return TestClient(app)


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert "/api/compile" in response.json()["endpoints"]


def test_clean_contract(client):
    response = client.post("/api/clean-contract", json={"code": FOO})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["cleanedCode"].startswith("// SPDX-License-Identifier: MIT")
    assert "`" not in body["cleanedCode"]
    assert body["hasImports"] is True


@pytest.mark.parametrize("payload", [{}, {"code": ""}, {"code": "   "}])
def test_clean_contract_requires_code(client, payload):
    assert client.post("/api/clean-contract", json=payload).status_code == 400


def test_resolve(client):
    response = client.post("/api/resolve", json={"contractCode": FOO})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["dependencies"] == ["../utils/Context.sol", "./Ownable.sol"]
    assert body["diagnostics"] == []
    assert body["source"].count("pragma solidity") == 1


def test_resolve_reports_unresolved(client):
    code = 'pragma solidity ^0.8.0;\nimport "./Nope.sol";\ncontract A {}'
    body = client.post("/api/resolve", json={"contractCode": code}).json()
    assert body["diagnostics"] == ["unresolved import: `./Nope.sol`"]
    assert body["details"][0]["importer"] == "root"


def test_resolve_rejects_fence_without_code(client):
    response = client.post("/api/resolve", json={"contractCode": "```solidity\n```"})
    assert response.status_code == 400


def test_dependency_tree(client):
    response = client.post("/api/dependency-tree", json={"contractCode": FOO})
    tree = response.json()["tree"]
    assert tree["path"] == "root"
    assert tree["imports"][0]["path"] == "./Ownable.sol"
    assert tree["imports"][0]["imports"][0]["path"] == "../utils/Context.sol"


def test_compile(client, compiler):
    response = client.post("/api/compile", json={"contractCode": FOO, "contractName": "Foo.sol"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["contractName"] == "Foo"
    assert body["bytecode"] == "0x6080"
    assert body["functions"] == ["owner()"]
    assert body["dependencies"] == ["../utils/Context.sol", "./Ownable.sol"]

    source, contract_name = compiler.calls[0]
    assert contract_name == "Foo.sol"
    assert source == body["source"]
    assert "import " not in source


def test_compile_failure(client, compiler):
    compiler.error = CompilationError("Compilation failed", ["ParserError: Expected ';' but got '}'"])
    response = client.post("/api/compile", json={"contractCode": FOO})
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["success"] is False
    assert detail["error"] == "Compilation failed"
    assert detail["errors"] == ["ParserError: Expected ';' but got '}'"]
    assert "contract Foo" in detail["source"]


def test_compile_requires_code(client, compiler):
    assert client.post("/api/compile", json={"contractCode": ""}).status_code == 400
    assert compiler.calls == []


def test_standard_library(client):
    body = client.get("/api/standard-library").json()
    assert body["total_count"] == len(default_library())
    names = [entry["name"] for entry in body["entries"]]
    assert "Ownable" in names
