"""
Built-in table of commonly imported dependencies.

Generated contracts reference the same dependency in several spellings
(``Ownable.sol``, ``./Ownable.sol``, ``@openzeppelin/contracts/access/Ownable.sol``,
a GitHub URL, ...). Each ``LibraryEntry`` lists one canonical source text and
the aliases it answers to, so the alias mapping is data rather than code.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Optional, Tuple

OPENZEPPELIN_PREFIX = "@openzeppelin/contracts/"

_GITHUB_BLOB = re.compile(
    r'^https?://(?:www\.)?github\.com/openzeppelin/openzeppelin-contracts/blob/[^/]+/contracts/(?P<rest>.+)$',
    re.IGNORECASE,
)
_GITHUB_RAW = re.compile(
    r'^https?://raw\.githubusercontent\.com/openzeppelin/openzeppelin-contracts/[^/]+/contracts/(?P<rest>.+)$',
    re.IGNORECASE,
)
_VERSIONED_PACKAGE = re.compile(r'^@openzeppelin/contracts@[^/]+/')
_RELATIVE_PREFIX = re.compile(r'^(?:\.\.?/)+')


def canonical_import_path(path: str) -> str:
    """
    Rewrite an import path into the spelling used as a table key.

    GitHub URLs and version-pinned package specifiers for OpenZeppelin become
    the plain scoped package path; leading ``./`` and ``../`` segments are
    dropped so relative spellings collapse onto the package-relative alias.
    """
    path = path.strip()
    for pattern in (_GITHUB_BLOB, _GITHUB_RAW):
        match = pattern.match(path)
        if match:
            return OPENZEPPELIN_PREFIX + match.group("rest")
    path = _VERSIONED_PACKAGE.sub(OPENZEPPELIN_PREFIX, path)
    return _RELATIVE_PREFIX.sub("", path)


@dataclass(frozen=True)
class LibraryEntry:
    """One logical dependency and every import spelling that refers to it."""

    name: str
    package_path: str
    source: str
    extra_aliases: Tuple[str, ...] = ()

    @property
    def aliases(self) -> Tuple[str, ...]:
        spellings = [self.package_path]
        if self.package_path.startswith(OPENZEPPELIN_PREFIX):
            relative = self.package_path[len(OPENZEPPELIN_PREFIX):]
            spellings += [relative, "contracts/" + relative]
        spellings.append(self.package_path.rsplit("/", 1)[-1])
        spellings.extend(self.extra_aliases)
        # dict preserves first-seen order
        return tuple(dict.fromkeys(spellings))

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "packagePath": self.package_path,
            "aliases": list(self.aliases),
        }


class StandardLibrary:
    """Read-only alias table. Construct once and pass it where it is needed."""

    def __init__(self, entries: Iterable[LibraryEntry]):
        self._entries: Tuple[LibraryEntry, ...] = tuple(entries)
        table: Dict[str, LibraryEntry] = {}
        for entry in self._entries:
            for alias in entry.aliases:
                existing = table.get(alias)
                if existing is not None and existing is not entry:
                    raise ValueError(
                        f"Alias {alias!r} maps to both {existing.name} and {entry.name}"
                    )
                table[alias] = entry
        self._aliases = MappingProxyType(table)

    @property
    def entries(self) -> Tuple[LibraryEntry, ...]:
        return self._entries

    def entry_for(self, path: str) -> Optional[LibraryEntry]:
        entry = self._aliases.get(path)
        if entry is None:
            entry = self._aliases.get(canonical_import_path(path))
        return entry

    def get(self, path: str) -> Optional[str]:
        """Return the source text registered for ``path`` or ``None``."""
        entry = self.entry_for(path)
        return entry.source if entry is not None else None

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.entry_for(path) is not None

    def __iter__(self) -> Iterator[LibraryEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


CONTEXT_SOURCE = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

abstract contract Context {
    function _msgSender() internal view virtual returns (address) {
        return msg.sender;
    }

    function _msgData() internal view virtual returns (bytes calldata) {
        return msg.data;
    }

    function _contextSuffixLength() internal view virtual returns (uint256) {
        return 0;
    }
}
"""

OWNABLE_SOURCE = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

import "../utils/Context.sol";

abstract contract Ownable is Context {
    address private _owner;

    event OwnershipTransferred(address indexed previousOwner, address indexed newOwner);

    constructor() {
        _transferOwnership(_msgSender());
    }

    modifier onlyOwner() {
        _checkOwner();
        _;
    }

    function owner() public view virtual returns (address) {
        return _owner;
    }

    function _checkOwner() internal view virtual {
        require(owner() == _msgSender(), "Ownable: caller is not the owner");
    }

    function renounceOwnership() public virtual onlyOwner {
        _transferOwnership(address(0));
    }

    function transferOwnership(address newOwner) public virtual onlyOwner {
        require(newOwner != address(0), "Ownable: new owner is the zero address");
        _transferOwnership(newOwner);
    }

    function _transferOwnership(address newOwner) internal virtual {
        address oldOwner = _owner;
        _owner = newOwner;
        emit OwnershipTransferred(oldOwner, newOwner);
    }
}
"""

PAUSABLE_SOURCE = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

import "../utils/Context.sol";

abstract contract Pausable is Context {
    event Paused(address account);
    event Unpaused(address account);

    bool private _paused;

    constructor() {
        _paused = false;
    }

    modifier whenNotPaused() {
        require(!paused(), "Pausable: paused");
        _;
    }

    modifier whenPaused() {
        require(paused(), "Pausable: not paused");
        _;
    }

    function paused() public view virtual returns (bool) {
        return _paused;
    }

    function _pause() internal virtual whenNotPaused {
        _paused = true;
        emit Paused(_msgSender());
    }

    function _unpause() internal virtual whenPaused {
        _paused = false;
        emit Unpaused(_msgSender());
    }
}
"""

REENTRANCY_GUARD_SOURCE = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

abstract contract ReentrancyGuard {
    uint256 private constant _NOT_ENTERED = 1;
    uint256 private constant _ENTERED = 2;

    uint256 private _status;

    constructor() {
        _status = _NOT_ENTERED;
    }

    modifier nonReentrant() {
        require(_status != _ENTERED, "ReentrancyGuard: reentrant call");
        _status = _ENTERED;
        _;
        _status = _NOT_ENTERED;
    }

    function _reentrancyGuardEntered() internal view returns (bool) {
        return _status == _ENTERED;
    }
}
"""

STRINGS_SOURCE = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

library Strings {
    bytes16 private constant _HEX_SYMBOLS = "0123456789abcdef";
    uint8 private constant _ADDRESS_LENGTH = 20;

    function toString(uint256 value) internal pure returns (string memory) {
        if (value == 0) {
            return "0";
        }
        uint256 temp = value;
        uint256 digits;
        while (temp != 0) {
            digits++;
            temp /= 10;
        }
        bytes memory buffer = new bytes(digits);
        while (value != 0) {
            digits -= 1;
            buffer[digits] = bytes1(uint8(48 + uint256(value % 10)));
            value /= 10;
        }
        return string(buffer);
    }

    function toHexString(uint256 value) internal pure returns (string memory) {
        if (value == 0) {
            return "0x00";
        }
        uint256 temp = value;
        uint256 length = 0;
        while (temp != 0) {
            length++;
            temp >>= 8;
        }
        return toHexString(value, length);
    }

    function toHexString(uint256 value, uint256 length) internal pure returns (string memory) {
        bytes memory buffer = new bytes(2 * length + 2);
        buffer[0] = "0";
        buffer[1] = "x";
        for (uint256 i = 2 * length + 1; i > 1; --i) {
            buffer[i] = _HEX_SYMBOLS[value & 0xf];
            value >>= 4;
        }
        require(value == 0, "Strings: hex length insufficient");
        return string(buffer);
    }

    function toHexString(address addr) internal pure returns (string memory) {
        return toHexString(uint256(uint160(addr)), _ADDRESS_LENGTH);
    }
}
"""

COUNTERS_SOURCE = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

library Counters {
    struct Counter {
        uint256 _value;
    }

    function current(Counter storage counter) internal view returns (uint256) {
        return counter._value;
    }

    function increment(Counter storage counter) internal {
        unchecked {
            counter._value += 1;
        }
    }

    function decrement(Counter storage counter) internal {
        uint256 value = counter._value;
        require(value > 0, "Counter: decrement overflow");
        unchecked {
            counter._value = value - 1;
        }
    }

    function reset(Counter storage counter) internal {
        counter._value = 0;
    }
}
"""

IERC20_SOURCE = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

interface IERC20 {
    event Transfer(address indexed from, address indexed to, uint256 value);
    event Approval(address indexed owner, address indexed spender, uint256 value);

    function totalSupply() external view returns (uint256);

    function balanceOf(address account) external view returns (uint256);

    function transfer(address to, uint256 amount) external returns (bool);

    function allowance(address owner, address spender) external view returns (uint256);

    function approve(address spender, uint256 amount) external returns (bool);

    function transferFrom(address from, address to, uint256 amount) external returns (bool);
}
"""

ERC20_SOURCE = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

import "./IERC20.sol";
import "../../utils/Context.sol";

contract ERC20 is Context, IERC20 {
    mapping(address => uint256) private _balances;
    mapping(address => mapping(address => uint256)) private _allowances;

    uint256 private _totalSupply;
    string private _name;
    string private _symbol;

    constructor(string memory name_, string memory symbol_) {
        _name = name_;
        _symbol = symbol_;
    }

    function name() public view virtual returns (string memory) {
        return _name;
    }

    function symbol() public view virtual returns (string memory) {
        return _symbol;
    }

    function decimals() public view virtual returns (uint8) {
        return 18;
    }

    function totalSupply() public view virtual override returns (uint256) {
        return _totalSupply;
    }

    function balanceOf(address account) public view virtual override returns (uint256) {
        return _balances[account];
    }

    function transfer(address to, uint256 amount) public virtual override returns (bool) {
        _transfer(_msgSender(), to, amount);
        return true;
    }

    function allowance(address owner, address spender) public view virtual override returns (uint256) {
        return _allowances[owner][spender];
    }

    function approve(address spender, uint256 amount) public virtual override returns (bool) {
        _approve(_msgSender(), spender, amount);
        return true;
    }

    function transferFrom(address from, address to, uint256 amount) public virtual override returns (bool) {
        _spendAllowance(from, _msgSender(), amount);
        _transfer(from, to, amount);
        return true;
    }

    function _transfer(address from, address to, uint256 amount) internal virtual {
        require(from != address(0), "ERC20: transfer from the zero address");
        require(to != address(0), "ERC20: transfer to the zero address");

        _beforeTokenTransfer(from, to, amount);

        uint256 fromBalance = _balances[from];
        require(fromBalance >= amount, "ERC20: transfer amount exceeds balance");
        unchecked {
            _balances[from] = fromBalance - amount;
            _balances[to] += amount;
        }

        emit Transfer(from, to, amount);

        _afterTokenTransfer(from, to, amount);
    }

    function _mint(address account, uint256 amount) internal virtual {
        require(account != address(0), "ERC20: mint to the zero address");

        _beforeTokenTransfer(address(0), account, amount);

        _totalSupply += amount;
        unchecked {
            _balances[account] += amount;
        }
        emit Transfer(address(0), account, amount);

        _afterTokenTransfer(address(0), account, amount);
    }

    function _burn(address account, uint256 amount) internal virtual {
        require(account != address(0), "ERC20: burn from the zero address");

        _beforeTokenTransfer(account, address(0), amount);

        uint256 accountBalance = _balances[account];
        require(accountBalance >= amount, "ERC20: burn amount exceeds balance");
        unchecked {
            _balances[account] = accountBalance - amount;
            _totalSupply -= amount;
        }

        emit Transfer(account, address(0), amount);

        _afterTokenTransfer(account, address(0), amount);
    }

    function _approve(address owner, address spender, uint256 amount) internal virtual {
        require(owner != address(0), "ERC20: approve from the zero address");
        require(spender != address(0), "ERC20: approve to the zero address");

        _allowances[owner][spender] = amount;
        emit Approval(owner, spender, amount);
    }

    function _spendAllowance(address owner, address spender, uint256 amount) internal virtual {
        uint256 currentAllowance = allowance(owner, spender);
        if (currentAllowance != type(uint256).max) {
            require(currentAllowance >= amount, "ERC20: insufficient allowance");
            unchecked {
                _approve(owner, spender, currentAllowance - amount);
            }
        }
    }

    function _beforeTokenTransfer(address from, address to, uint256 amount) internal virtual {}

    function _afterTokenTransfer(address from, address to, uint256 amount) internal virtual {}
}
"""

ERC20_BURNABLE_SOURCE = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

import "../ERC20.sol";
import "../../../utils/Context.sol";

abstract contract ERC20Burnable is Context, ERC20 {
    function burn(uint256 amount) public virtual {
        _burn(_msgSender(), amount);
    }

    function burnFrom(address account, uint256 amount) public virtual {
        _spendAllowance(account, _msgSender(), amount);
        _burn(account, amount);
    }
}
"""

ERC721_SOURCE = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

import "../../utils/Context.sol";
import "../../utils/Strings.sol";

abstract contract ERC721 is Context {
    using Strings for uint256;

    string private _name;
    string private _symbol;

    mapping(uint256 => address) private _owners;
    mapping(address => uint256) private _balances;
    mapping(uint256 => address) private _tokenApprovals;
    mapping(address => mapping(address => bool)) private _operatorApprovals;

    event Transfer(address indexed from, address indexed to, uint256 indexed tokenId);
    event Approval(address indexed owner, address indexed approved, uint256 indexed tokenId);
    event ApprovalForAll(address indexed owner, address indexed operator, bool approved);

    constructor(string memory name_, string memory symbol_) {
        _name = name_;
        _symbol = symbol_;
    }

    function name() public view virtual returns (string memory) {
        return _name;
    }

    function symbol() public view virtual returns (string memory) {
        return _symbol;
    }

    function balanceOf(address owner) public view virtual returns (uint256) {
        require(owner != address(0), "ERC721: address zero is not a valid owner");
        return _balances[owner];
    }

    function ownerOf(uint256 tokenId) public view virtual returns (address) {
        address owner = _owners[tokenId];
        require(owner != address(0), "ERC721: invalid token ID");
        return owner;
    }

    function tokenURI(uint256 tokenId) public view virtual returns (string memory) {
        _requireMinted(tokenId);
        string memory baseURI = _baseURI();
        return bytes(baseURI).length > 0 ? string(abi.encodePacked(baseURI, tokenId.toString())) : "";
    }

    function approve(address to, uint256 tokenId) public virtual {
        address owner = ownerOf(tokenId);
        require(to != owner, "ERC721: approval to current owner");
        require(
            _msgSender() == owner || isApprovedForAll(owner, _msgSender()),
            "ERC721: approve caller is not token owner or approved for all"
        );
        _approve(to, tokenId);
    }

    function getApproved(uint256 tokenId) public view virtual returns (address) {
        _requireMinted(tokenId);
        return _tokenApprovals[tokenId];
    }

    function setApprovalForAll(address operator, bool approved) public virtual {
        require(_msgSender() != operator, "ERC721: approve to caller");
        _operatorApprovals[_msgSender()][operator] = approved;
        emit ApprovalForAll(_msgSender(), operator, approved);
    }

    function isApprovedForAll(address owner, address operator) public view virtual returns (bool) {
        return _operatorApprovals[owner][operator];
    }

    function transferFrom(address from, address to, uint256 tokenId) public virtual {
        require(_isApprovedOrOwner(_msgSender(), tokenId), "ERC721: caller is not token owner or approved");
        _transfer(from, to, tokenId);
    }

    function safeTransferFrom(address from, address to, uint256 tokenId) public virtual {
        transferFrom(from, to, tokenId);
    }

    function _baseURI() internal view virtual returns (string memory) {
        return "";
    }

    function _exists(uint256 tokenId) internal view virtual returns (bool) {
        return _owners[tokenId] != address(0);
    }

    function _isApprovedOrOwner(address spender, uint256 tokenId) internal view virtual returns (bool) {
        address owner = ownerOf(tokenId);
        return (spender == owner || isApprovedForAll(owner, spender) || getApproved(tokenId) == spender);
    }

    function _safeMint(address to, uint256 tokenId) internal virtual {
        _mint(to, tokenId);
    }

    function _mint(address to, uint256 tokenId) internal virtual {
        require(to != address(0), "ERC721: mint to the zero address");
        require(!_exists(tokenId), "ERC721: token already minted");

        _balances[to] += 1;
        _owners[tokenId] = to;

        emit Transfer(address(0), to, tokenId);
    }

    function _burn(uint256 tokenId) internal virtual {
        address owner = ownerOf(tokenId);

        delete _tokenApprovals[tokenId];
        _balances[owner] -= 1;
        delete _owners[tokenId];

        emit Transfer(owner, address(0), tokenId);
    }

    function _transfer(address from, address to, uint256 tokenId) internal virtual {
        require(ownerOf(tokenId) == from, "ERC721: transfer from incorrect owner");
        require(to != address(0), "ERC721: transfer to the zero address");

        delete _tokenApprovals[tokenId];
        _balances[from] -= 1;
        _balances[to] += 1;
        _owners[tokenId] = to;

        emit Transfer(from, to, tokenId);
    }

    function _approve(address to, uint256 tokenId) internal virtual {
        _tokenApprovals[tokenId] = to;
        emit Approval(ownerOf(tokenId), to, tokenId);
    }

    function _requireMinted(uint256 tokenId) internal view virtual {
        require(_exists(tokenId), "ERC721: invalid token ID");
    }
}
"""

BUILTIN_ENTRIES: Tuple[LibraryEntry, ...] = (
    LibraryEntry("Context", "@openzeppelin/contracts/utils/Context.sol", CONTEXT_SOURCE),
    LibraryEntry("Ownable", "@openzeppelin/contracts/access/Ownable.sol", OWNABLE_SOURCE),
    LibraryEntry(
        "Pausable",
        "@openzeppelin/contracts/security/Pausable.sol",
        PAUSABLE_SOURCE,
        # OpenZeppelin 5.x moved it under utils/
        extra_aliases=("@openzeppelin/contracts/utils/Pausable.sol", "utils/Pausable.sol"),
    ),
    LibraryEntry(
        "ReentrancyGuard",
        "@openzeppelin/contracts/security/ReentrancyGuard.sol",
        REENTRANCY_GUARD_SOURCE,
        extra_aliases=("@openzeppelin/contracts/utils/ReentrancyGuard.sol", "utils/ReentrancyGuard.sol"),
    ),
    LibraryEntry("Strings", "@openzeppelin/contracts/utils/Strings.sol", STRINGS_SOURCE),
    LibraryEntry("Counters", "@openzeppelin/contracts/utils/Counters.sol", COUNTERS_SOURCE),
    LibraryEntry(
        "IERC20",
        "@openzeppelin/contracts/token/ERC20/IERC20.sol",
        IERC20_SOURCE,
        extra_aliases=("@openzeppelin/contracts/interfaces/IERC20.sol", "interfaces/IERC20.sol"),
    ),
    LibraryEntry("ERC20", "@openzeppelin/contracts/token/ERC20/ERC20.sol", ERC20_SOURCE),
    LibraryEntry(
        "ERC20Burnable",
        "@openzeppelin/contracts/token/ERC20/extensions/ERC20Burnable.sol",
        ERC20_BURNABLE_SOURCE,
    ),
    LibraryEntry("ERC721", "@openzeppelin/contracts/token/ERC721/ERC721.sol", ERC721_SOURCE),
)


@lru_cache(maxsize=None)
def default_library() -> StandardLibrary:
    """The built-in table. Shared, but immutable."""
    return StandardLibrary(BUILTIN_ENTRIES)
