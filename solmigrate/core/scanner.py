"""
Structural Scanner — Locates top-level declarations in raw Solidity text.

No grammar, no compiler: the source is first masked (comments and string
literal contents blanked out, offsets preserved), then declaration headers are
found with a keyword pattern and their base lists and bodies are delimited
with plain forward searches and a brace-depth counter over the masked text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

from solmigrate.models.analysis_models import ContractKind

_CLOSERS = {"(": ")", "[": "]", "{": "}"}

# Header only: the base list and body are delimited with plain searches so no
# pattern ever scans past the next `{` or `;`
_HEADER_RE = re.compile(
    r"(?<![\w$.])(abstract\s+)?(contract|interface|library)\s+([A-Za-z_$][\w$]*)"
)
_TERMINATOR_RE = re.compile(r"[{;]")
_BASE_LIST_RE = re.compile(r"is(?![\w$])")
_PRAGMA_RE = re.compile(r"\bpragma\s+solidity\b")
_IMPORT_RE = re.compile(r"\bimport\b")
_QUOTED_RE = re.compile(r"""["']([^"'\n]+)["']""")


class ScanError(Exception):
    """Raised when the structure of the source cannot be delimited."""


class UnterminatedBodyError(ScanError):
    """A declaration's opening brace has no matching closing brace."""

    def __init__(self, name: str, offset: int) -> None:
        self.name = name
        self.offset = offset
        super().__init__(
            f"Unterminated body for '{name}': no closing brace for '{{' at offset {offset}"
        )


@dataclass(frozen=True)
class DeclarationSpan:
    """One contract-like declaration and the exact span of its body."""

    kind: ContractKind
    name: str
    base_names: tuple[str, ...]
    body: str
    masked_body: str
    is_abstract: bool = False
    offset: int = 0


def _blank(chars: list[str], start: int, end: int) -> None:
    for i in range(start, end):
        if chars[i] != "\n":
            chars[i] = " "


def mask_source(source: str) -> str:
    """
    Blank out comments and string-literal contents.

    The result has the same length as the input and keeps every newline, so
    offsets found in the masked text index the original text directly. Quote
    characters survive; only what is between them is blanked.
    """
    chars = list(source)
    n = len(source)
    i = 0
    while i < n:
        ch = source[i]
        nxt = source[i + 1] if i + 1 < n else ""
        if ch == "/" and nxt == "/":
            end = source.find("\n", i)
            end = n if end == -1 else end
            _blank(chars, i, end)
            i = end
        elif ch == "/" and nxt == "*":
            end = source.find("*/", i + 2)
            end = n if end == -1 else end + 2
            _blank(chars, i, end)
            i = end
        elif ch in ("\"", "'"):
            j = i + 1
            while j < n and source[j] != ch and source[j] != "\n":
                j += 2 if source[j] == "\\" else 1
            j = min(j, n)
            _blank(chars, i + 1, j)
            # Solidity strings never span lines: an unclosed one stops at the newline
            i = j + 1 if j < n and source[j] == ch else j
        else:
            i += 1
    return "".join(chars)


def find_matching(text: str, open_index: int) -> int:
    """
    Return the index of the bracket closing the one at ``open_index``, or -1.

    Depth starts at 1 on the opening bracket and every same-kind bracket after
    it increments or decrements it. ``text`` should already be masked.
    """
    opener = text[open_index]
    closer = _CLOSERS[opener]
    depth = 0
    for i in range(open_index, len(text)):
        ch = text[i]
        if ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return i
    return -1


def split_top_level(text: str, separator: str = ",") -> list[str]:
    """Split on ``separator`` occurring outside any (), [] or {} nesting."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in text:
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth = max(0, depth - 1)
        if ch == separator and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return parts


def _parse_base_names(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    names: list[str] = []
    for part in split_top_level(raw):
        # `ERC20("Name", "SYM")` -> `ERC20`
        name = part.split("(", 1)[0].strip()
        if name:
            names.append(name)
    return tuple(names)


def extract_pragma(source: str, masked: str | None = None) -> str:
    """Return the `pragma solidity` version expression, or 'unknown'."""
    masked = mask_source(source) if masked is None else masked
    match = _PRAGMA_RE.search(masked)
    if not match:
        return "unknown"
    end = masked.find(";", match.end())
    if end == -1:
        return "unknown"
    return source[match.end():end].strip() or "unknown"


def extract_imports(source: str, masked: str | None = None) -> list[str]:
    """
    Return every imported path in source order.

    Handles `import "x";`, `import 'x';` and the `... from "x";` forms.
    Imports inside comments or strings are ignored. Each import statement is
    read once, up to its `;`, so the whole pass is linear in the source size.
    """
    masked = mask_source(source) if masked is None else masked
    imports: list[str] = []
    consumed = 0
    for match in _IMPORT_RE.finditer(masked):
        if match.start() < consumed:
            continue
        end = masked.find(";", match.end())
        last = end == -1
        end = len(masked) if last else end
        quoted = _QUOTED_RE.search(source, match.end(), end)
        if quoted:
            imports.append(quoted.group(1))
        if last:
            break
        consumed = end + 1
    return imports


def scan_declarations(source: str, masked: str | None = None) -> Iterator[DeclarationSpan]:
    """
    Yield every top-level contract, interface and library declaration in source order.

    Declarations may start anywhere, not only at the beginning of a line.
    Scanning resumes after each body, and the next `{` or `;` is located once
    and reused while later headers still precede it, so the pass is linear.

    A file with no declarations yields nothing. Raises UnterminatedBodyError
    when a body never closes; spans yielded before that remain valid.
    """
    masked = mask_source(source) if masked is None else masked
    pos = 0
    terminator = None
    while True:
        match = _HEADER_RE.search(masked, pos)
        if match is None:
            return
        if terminator is None or terminator.start() < match.end():
            terminator = _TERMINATOR_RE.search(masked, match.end())
            if terminator is None:
                return

        # `contract A is B contract C {`: the later header owns the brace
        inner = _HEADER_RE.search(masked, match.end(), terminator.start())
        if inner is not None:
            pos = inner.start()
            continue

        pos = terminator.end()
        if terminator.group() == ";":
            continue
        between = masked[match.end():terminator.start()].strip()
        if between and not _BASE_LIST_RE.match(between):
            continue

        name = match.group(3)
        open_index = terminator.start()
        close_index = find_matching(masked, open_index)
        if close_index == -1:
            raise UnterminatedBodyError(name, open_index)

        yield DeclarationSpan(
            kind=ContractKind(match.group(2)),
            name=name,
            base_names=_parse_base_names(between[2:]),
            body=source[open_index + 1:close_index],
            masked_body=masked[open_index + 1:close_index],
            is_abstract=bool(match.group(1)),
            offset=match.start(2),
        )
        pos = close_index + 1
