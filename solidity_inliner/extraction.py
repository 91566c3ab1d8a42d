"""
Regex helpers for the handful of Solidity constructs the inliner cares about.

Nothing here parses Solidity. Each helper finds one kind of top-level
directive (import, pragma, SPDX license comment, type declaration header) so
the resolver and assembler never touch a pattern directly.
"""

import re
from typing import List, Optional

# Strings are matched first so comment markers inside literals survive.
_COMMENT_OR_STRING = re.compile(
    r'("(?:\\.|[^"\\\n])*"|\'(?:\\.|[^\'\\\n])*\')|(/\*.*?\*/|//[^\n]*)',
    re.DOTALL,
)

IMPORT_STATEMENT = re.compile(
    r'^[ \t]*import\s+'
    r'(?:[^;"\']*?\bfrom\s+)?'
    r'(["\'])(?P<path>[^"\']+)\1'
    r'(?:\s+as\s+[A-Za-z_$][\w$]*)?'
    r'\s*;[ \t]*\n?',
    re.MULTILINE,
)

LICENSE_MARKER = re.compile(
    r'(?://[^\n]*?|/\*(?:(?!\*/).)*?)SPDX-License-Identifier',
    re.DOTALL,
)

_SPDX_ID = re.compile(
    r'SPDX-License-Identifier:[ \t]*(?P<id>[^\n]*?)[ \t]*(?:\*/[ \t]*)?$',
    re.MULTILINE,
)

# a comment that fills its own line(s) is removed together with its newline
_LICENSE_COMMENT_OR_STRING = re.compile(
    r'("(?:\\.|[^"\\\n])*"|\'(?:\\.|[^\'\\\n])*\')'
    r'|(?P<indent>^[ \t]*)?(?P<comment>/\*.*?\*/|//[^\n]*)(?P<trail>[ \t]*(?:\n|\Z))?',
    re.DOTALL | re.MULTILINE,
)

PRAGMA_STATEMENT = re.compile(
    r'^[ \t]*pragma\s+solidity\s+(?P<version>[^;]+?)\s*;[ \t]*\n?',
    re.MULTILINE,
)

_DECLARATION_OR_BRACE = re.compile(
    r'[{}]|\b(?:abstract\s+)?(?P<kind>contract|interface|library)\s+(?P<name>[A-Za-z_$][\w$]*)'
)


def _drop_comment(match: re.Match) -> str:
    if match.group(1) is not None:
        return match.group(1)
    # keep line numbering stable for anything scanning the result
    return "\n" * match.group(2).count("\n")


def strip_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments, leaving string literals intact."""
    return _COMMENT_OR_STRING.sub(_drop_comment, text)


def _code_only(text: str) -> str:
    def blank(match: re.Match) -> str:
        if match.group(1) is not None:
            return '""'
        return "\n" * match.group(2).count("\n")

    return _COMMENT_OR_STRING.sub(blank, text)


def extract_import_paths(text: str) -> List[str]:
    """Return the import paths of ``text`` in first-seen order, without repeats."""
    seen = set()
    paths = []
    for match in IMPORT_STATEMENT.finditer(strip_comments(text)):
        path = match.group("path").strip()
        if path and path not in seen:
            seen.add(path)
            paths.append(path)
    return paths


def extract_declared_symbol_names(text: str) -> List[str]:
    """
    Return the names of top-level contracts, abstract contracts, interfaces
    and libraries declared in ``text``, in declaration order.

    Only headers at brace depth zero count, so a ``contract`` keyword inside
    a function body or a string literal is ignored.
    """
    names = []
    depth = 0
    for match in _DECLARATION_OR_BRACE.finditer(_code_only(text)):
        token = match.group(0)
        if token == "{":
            depth += 1
        elif token == "}":
            depth = max(0, depth - 1)
        elif depth == 0:
            name = match.group("name")
            if name not in names:
                names.append(name)
    return names


def extract_pragma(text: str) -> Optional[str]:
    """Return the version constraint of the first ``pragma solidity`` statement."""
    match = PRAGMA_STATEMENT.search(strip_comments(text))
    if not match:
        return None
    return " ".join(match.group("version").split())


def extract_license(text: str) -> Optional[str]:
    """
    Return the identifier of the first SPDX license comment, e.g. ``MIT``.

    Any comment form counts: ``//``, ``/* */`` and multi-line ``/** ... */``
    doc blocks.
    """
    for match in _COMMENT_OR_STRING.finditer(text):
        comment = match.group(2)
        if not comment or "SPDX-License-Identifier" not in comment:
            continue
        found = _SPDX_ID.search(comment)
        if found and found.group("id").strip():
            return found.group("id").strip()
    return None


def strip_imports(text: str) -> str:
    return IMPORT_STATEMENT.sub("", text)


def _drop_license(match: re.Match) -> str:
    comment = match.group("comment")
    if comment is None or "SPDX-License-Identifier" not in comment:
        return match.group(0)
    if match.group("indent") is not None and match.group("trail") is not None:
        return ""
    return match.group("trail") or ""


def strip_license_lines(text: str) -> str:
    """Remove every comment carrying an SPDX identifier, whatever its form."""
    return _LICENSE_COMMENT_OR_STRING.sub(_drop_license, text)


def strip_pragma_lines(text: str) -> str:
    return PRAGMA_STATEMENT.sub("", text)


def has_imports(text: str) -> bool:
    return bool(extract_import_paths(text))


def format_license_line(identifier: str) -> str:
    return f"// SPDX-License-Identifier: {identifier}"


def format_pragma_line(version: str) -> str:
    return f"pragma solidity {version};"
