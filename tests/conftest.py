"""Shared fixtures: small in-memory dependency tables."""

from collections import Counter
from typing import Dict, Optional

import pytest

CONTEXT = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

abstract contract Context {
    function _msgSender() internal view virtual returns (address) {
        return msg.sender;
    }
}
"""

OWNABLE = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

import "./Context.sol";

contract Ownable is Context {
    address private _owner;

    constructor() {
        _owner = _msgSender();
    }
}
"""


class FakeLookup:
    """Dict-backed lookup that counts how often each path is requested."""

    def __init__(self, sources: Dict[str, str]):
        self.sources = sources
        self.calls = Counter()

    def __call__(self, path: str) -> Optional[str]:
        self.calls[path] += 1
        return self.sources.get(path)


@pytest.fixture
def make_lookup():
    return FakeLookup


@pytest.fixture
def ownable_lookup():
    return FakeLookup({
        "./Ownable.sol": OWNABLE,
        "@openzeppelin/contracts/access/Ownable.sol": OWNABLE,
        "./Context.sol": CONTEXT,
    })
