"""Merge a root contract and its resolved dependencies into one source file."""

import re
from typing import Iterable

from .config import DEFAULT_LICENSE, DEFAULT_PRAGMA
from .extraction import (
    extract_license,
    extract_pragma,
    format_license_line,
    format_pragma_line,
    strip_imports,
    strip_license_lines,
    strip_pragma_lines,
)
from .resolver import SourceUnit

INLINED_DEPENDENCIES_MARKER = "// AUTO-INLINED DEPENDENCIES"
MAIN_CONTRACT_MARKER = "// MAIN CONTRACT"

_BLANK_RUN = re.compile(r'\n[ \t]*\n(?:[ \t]*\n)+')


def clean_body(text: str) -> str:
    """Drop license, pragma and import lines and tidy the blank lines left behind."""
    body = strip_imports(strip_pragma_lines(strip_license_lines(text)))
    body = "\n".join(line.rstrip() for line in body.splitlines())
    return _BLANK_RUN.sub("\n\n", body).strip()


def assemble(
    root: SourceUnit,
    dependencies: Iterable[SourceUnit],
    default_license: str = DEFAULT_LICENSE,
    default_pragma: str = DEFAULT_PRAGMA,
) -> str:
    """
    Build the single compilation unit.

    Layout: license line, pragma line, the inlined dependencies in discovery
    order (each tagged with the path it came from), then the main contract.
    The root's own license and pragma win over the defaults. With no
    dependencies the markers are left out and the result is just the cleaned
    root under its header.
    """
    license_id = extract_license(root.raw_text) or default_license
    pragma = extract_pragma(root.raw_text) or default_pragma

    sections = [f"{format_license_line(license_id)}\n{format_pragma_line(pragma)}"]

    inlined = []
    for unit in dependencies:
        body = clean_body(unit.raw_text)
        if body:
            inlined.append(f"// Inlined from {unit.path}\n{body}")

    main_body = clean_body(root.raw_text)
    if inlined:
        sections.append(INLINED_DEPENDENCIES_MARKER)
        sections.extend(inlined)
        sections.append(MAIN_CONTRACT_MARKER)
    if main_body:
        sections.append(main_body)

    return "\n\n".join(sections) + "\n"
