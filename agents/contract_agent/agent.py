import os

from google.adk.agents import Agent

# Import all contract preparation functions
try:
    from .contract_utils import (
        clean_contract_code,
        resolve_contract_imports,
        compile_contract
    )
except ImportError:
    # Fallback for when running as script or when relative import fails
    from contract_utils import (
        clean_contract_code,
        resolve_contract_imports,
        compile_contract
    )

try:
    from .contract_helpers import (
        get_dependency_tree,
        list_standard_library,
        handle_compilation_errors
    )
except ImportError:
    # Fallback for when running as script or when relative import fails
    from contract_helpers import (
        get_dependency_tree,
        list_standard_library,
        handle_compilation_errors
    )


MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.0-flash")

# Create the smart contract copilot agent
root_agent = Agent(
    name="solidity_copilot",
    model=MODEL,
    description="AI agent that generates, explains, cleans and compiles Solidity smart contracts.",
    instruction="""
    You are an expert Solidity assistant that writes, explains and compiles smart contracts.

    🏗️ **Capabilities:**
    - Write Solidity contracts from a plain-language description
    - Explain what a contract does, function by function
    - Clean pasted or generated code of markdown fences and prose
    - Inline OpenZeppelin and local imports so the contract compiles offline
    - Compile and report ABI, bytecode and compiler errors

    🔄 **Workflow:**
    1. **Write or receive code** - always start files with an SPDX license and a pragma
    2. **Clean** - run clean_contract_code on anything that came from chat
    3. **Check imports** - use get_dependency_tree and list_standard_library
    4. **Compile** - compile_contract resolves imports itself
    5. **Fix** - on failure, run handle_compilation_errors and revise the code

    Prefer imports that are in the standard library. Report resolution warnings
    (unresolved, circular or duplicate imports) to the user before compiling.
    """,
    tools=[
        clean_contract_code, resolve_contract_imports, compile_contract,
        get_dependency_tree, list_standard_library, handle_compilation_errors
    ]
)
