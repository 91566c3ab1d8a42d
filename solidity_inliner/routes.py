"""REST endpoints for cleaning, resolving and compiling contracts."""

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from .compiler import SolcCompiler
from .config import Settings
from .errors import CompilationError, InvalidSourceError
from .extraction import has_imports
from .lookup import Lookup
from .normalizer import normalize
from .pipeline import build_lookup, prepare_for_compilation
from .resolver import dependency_tree
from .standard_library import default_library

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["contracts"])


class CleanRequest(BaseModel):
    code: Optional[str] = None


class ContractRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    contract_code: Optional[str] = Field(default=None, alias="contractCode")


class CompileRequest(ContractRequest):
    contract_name: Optional[str] = Field(default=None, alias="contractName")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def get_lookup(settings: Settings = Depends(get_settings)) -> Lookup:
    return build_lookup(settings)


@lru_cache(maxsize=1)
def _shared_compiler() -> SolcCompiler:
    return SolcCompiler(get_settings())


def get_compiler() -> SolcCompiler:
    return _shared_compiler()


def _require_code(code: Optional[str], field_name: str) -> str:
    if not code or not code.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{field_name} is required")
    return code


@router.get("/health")
def health() -> dict:
    return {
        "message": "Solidity copilot backend is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "endpoints": [route.path for route in router.routes],
    }


@router.post("/clean-contract")
def clean_contract(request: CleanRequest) -> dict:
    code = _require_code(request.code, "code")
    cleaned = normalize(code)
    return {"success": True, "cleanedCode": cleaned, "hasImports": has_imports(cleaned)}


@router.post("/resolve")
def resolve_contract(
    request: ContractRequest,
    settings: Settings = Depends(get_settings),
    lookup: Lookup = Depends(get_lookup),
) -> dict:
    code = _require_code(request.contract_code, "contractCode")
    try:
        prepared = prepare_for_compilation(code, lookup, settings)
    except InvalidSourceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, **prepared.to_dict()}


@router.post("/dependency-tree")
def get_dependency_tree(
    request: ContractRequest,
    settings: Settings = Depends(get_settings),
    lookup: Lookup = Depends(get_lookup),
) -> dict:
    code = _require_code(request.contract_code, "contractCode")
    try:
        tree = dependency_tree(normalize(code), lookup, max_depth=settings.max_depth)
    except InvalidSourceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "tree": tree}


@router.post("/compile")
def compile_contract(
    request: CompileRequest,
    settings: Settings = Depends(get_settings),
    lookup: Lookup = Depends(get_lookup),
    compiler: SolcCompiler = Depends(get_compiler),
) -> dict:
    code = _require_code(request.contract_code, "contractCode")
    try:
        prepared = prepare_for_compilation(code, lookup, settings)
    except InvalidSourceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        compiled = compiler.compile(prepared.source, request.contract_name)
    except CompilationError as e:
        logger.info("Compilation rejected: %s", e)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "success": False,
                "error": str(e),
                "errors": e.errors,
                "diagnostics": prepared.messages,
                "source": prepared.source,
            },
        )

    return {
        "success": True,
        **compiled.to_dict(),
        "diagnostics": prepared.messages,
        "dependencies": prepared.dependencies,
        "source": prepared.source,
    }


@router.get("/standard-library")
def list_standard_library() -> dict:
    entries = [entry.to_dict() for entry in default_library()]
    return {"success": True, "entries": entries, "total_count": len(entries)}
