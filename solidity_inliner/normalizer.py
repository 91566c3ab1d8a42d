"""Clean AI-generated or pasted text down to a bare Solidity file."""

import re
from typing import Optional

from .extraction import LICENSE_MARKER

FENCED_BLOCK = re.compile(
    r'```[ \t]*(?P<lang>[\w+-]*)[^\n]*\n(?P<body>.*?)(?:```|\Z)',
    re.DOTALL,
)

FENCE_LINE = re.compile(r'^[ \t]*```[ \t]*[\w+-]*[ \t]*(?:\n|$)', re.MULTILINE)

# fences glued to code, e.g. "contract A {}```" or "...;```solidity"
GLUED_FENCE = re.compile(r'```(?:[\w+-]+(?=[ \t]*$))?', re.MULTILINE)

PRAGMA_LINE = re.compile(r"^[ \t]*pragma\b", re.MULTILINE)

SOLIDITY_TAGS = ("", "solidity", "sol")


def extract_code_blocks(markdown: str, language: Optional[str] = None) -> str:
    """
    Concatenate the bodies of all fenced code blocks in ``markdown``.

    With ``language`` set only blocks carrying that tag are kept. If there is
    no matching block the input is returned unchanged.
    """
    if not markdown:
        return ""

    blocks = []
    for match in FENCED_BLOCK.finditer(markdown):
        if language is not None and match.group("lang").lower() != language.lower():
            continue
        blocks.append(match.group("body").strip("\n"))

    if not blocks:
        return markdown
    return "\n\n".join(blocks).strip()


def _starts_like_solidity(text: str) -> bool:
    return text.startswith("pragma") or LICENSE_MARKER.match(text) is not None


def normalize(text: str) -> str:
    """
    Strip markdown fences and leading prose from ``text``.

    The result starts with a license comment or ``pragma`` whenever either
    appears anywhere in the input; otherwise the trimmed text is returned as
    is. Never raises, and ``normalize(normalize(x)) == normalize(x)``.
    """
    if not text:
        return ""

    cleaned = text.strip()

    if "```" in cleaned:
        blocks = [
            match.group("body").strip("\n")
            for match in FENCED_BLOCK.finditer(cleaned)
            if match.group("lang").lower() in SOLIDITY_TAGS
        ]
        if blocks:
            cleaned = "\n\n".join(blocks)
        cleaned = GLUED_FENCE.sub("", FENCE_LINE.sub("", cleaned)).strip()

    if not _starts_like_solidity(cleaned):
        starts = [
            m.start()
            for m in (LICENSE_MARKER.search(cleaned), PRAGMA_LINE.search(cleaned))
            if m is not None
        ]
        if starts:
            cleaned = cleaned[min(starts):].strip()

    return cleaned
