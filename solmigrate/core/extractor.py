"""
Declaration Extractor — Recovers state variables, functions and events from one body.

Works on the masked body text produced by the scanner. The body is cut into
top-level members (statements ending in ';' and headers ending in '{' at brace
depth 0); each matcher below looks only at those members, so locals declared
inside function bodies never leak into contract state. Unrecognised members are
dropped silently: extraction is best-effort and has no failure path of its own.
"""

from __future__ import annotations

import re
from bisect import bisect_left
from dataclasses import dataclass
from typing import Iterator

from solmigrate.core.scanner import DeclarationSpan, find_matching, split_top_level
from solmigrate.models.analysis_models import (
    ContractDef,
    EventDef,
    EventParameter,
    FunctionDef,
    Parameter,
    StateVariable,
)

VISIBILITIES = ("public", "private", "internal", "external")
MUTABILITIES = ("pure", "view", "payable")

_DATA_LOCATIONS = {"memory", "calldata", "storage"}
_VARIABLE_MODIFIERS = {"public", "private", "internal", "constant", "immutable", "transient"}
_NON_VARIABLE_KEYWORDS = {
    "function", "constructor", "modifier", "event", "error", "struct", "enum",
    "using", "fallback", "receive", "type", "pragma", "import",
}

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")
_TYPE_RE = re.compile(r"address payable|[A-Za-z_$][\w$.]*")
_OVERRIDE_RE = re.compile(r"\boverride\s*(?:\([^()]*\))?")
_VISIBILITY_RE = re.compile(r"\b(public|private|internal|external)\b")
_MUTABILITY_RE = re.compile(r"\b(pure|view|payable)\b")
_RETURNS_RE = re.compile(r"\breturns\s*\(")

_FUNCTION_RE = re.compile(r"^function\b\s*(\w*)\s*\(")
_CONSTRUCTOR_RE = re.compile(r"^constructor\s*\(")
_SPECIAL_RE = re.compile(r"^(fallback|receive)\s*\(")
_MODIFIER_RE = re.compile(r"^modifier\s+(\w+)\s*")
_EVENT_RE = re.compile(r"^event\s+(\w+)\s*\(")
_FUNCTION_TYPE_RE = re.compile(r"^function\s*\(")

# Trailing words that end a function declaration rather than name a variable
_FUNCTION_TAIL_KEYWORDS = {*VISIBILITIES, *MUTABILITIES, "returns", "virtual", "override"}


@dataclass(frozen=True)
class Member:
    """A top-level member of a contract body, whitespace-collapsed."""

    text: str
    terminator: str  # ";" or "{"


def iter_members(masked_body: str) -> Iterator[Member]:
    """Yield top-level statements and block headers of a masked body, in order."""
    depth = 0
    parens = 0
    start = 0
    for i, ch in enumerate(masked_body):
        if depth == 0 and ch == "(":
            parens += 1
        elif depth == 0 and ch == ")":
            parens = max(0, parens - 1)
        elif ch == "{":
            # `S({a: 1})` struct literals open braces inside parentheses
            if depth == 0 and parens == 0:
                yield Member(" ".join(masked_body[start:i].split()), "{")
                depth = 1
            elif depth > 0:
                depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                start = i + 1
                parens = 0
        elif ch == ";" and depth == 0 and parens == 0:
            text = " ".join(masked_body[start:i].split())
            if text:
                yield Member(text, ";")
            start = i + 1


# ── parameters ─────────────────────────────────────────────────────────

def _split_parameter(token: str) -> tuple[str, str]:
    """Return (name, type) for one parameter token; name is '' when absent."""
    words = [w for w in token.split(" ") if w not in _DATA_LOCATIONS and w != "indexed"]
    if len(words) > 1 and _IDENTIFIER_RE.match(words[-1]) and words[-1] != "payable":
        return words[-1], " ".join(words[:-1])
    return "", " ".join(words)


def parse_parameters(text: str) -> tuple[Parameter, ...]:
    params: list[Parameter] = []
    for token in split_top_level(text):
        token = " ".join(token.split())
        if not token:
            continue
        name, type_name = _split_parameter(token)
        params.append(Parameter(name=name, type_name=type_name or "unknown"))
    return tuple(params)


def parse_event_parameters(text: str) -> tuple[EventParameter, ...]:
    params: list[EventParameter] = []
    for token in split_top_level(text):
        token = " ".join(token.split())
        if not token:
            continue
        name, type_name = _split_parameter(token)
        params.append(
            EventParameter(
                name=name,
                type_name=type_name or "unknown",
                indexed="indexed" in token,
            )
        )
    return tuple(params)


def _parenthesized(text: str, open_index: int) -> tuple[str, str] | None:
    """Return (inside, after) for the parenthesis group at ``open_index``."""
    close = find_matching(text, open_index)
    if close == -1:
        return None
    return text[open_index + 1:close], text[close + 1:]


# ── state variables ────────────────────────────────────────────────────

def _split_type(text: str) -> tuple[str, str] | None:
    """Split a declaration into (type, rest), handling mappings and array suffixes."""
    if text.startswith("mapping") and text[7:].lstrip().startswith("("):
        open_index = text.index("(")
        close = find_matching(text, open_index)
        if close == -1:
            return None
        type_name, rest = text[:close + 1], text[close + 1:]
    else:
        match = _TYPE_RE.match(text)
        if not match:
            return None
        type_name, rest = match.group(0), text[match.end():]

    while rest.lstrip().startswith("["):
        rest = rest.lstrip()
        close = find_matching(rest, 0)
        if close == -1:
            return None
        type_name += rest[:close + 1].replace(" ", "")
        rest = rest[close + 1:]
    return type_name, rest


class _KeywordNeighbours:
    """
    Words written next to a keyword anywhere in a body, searchable by name.

    ``touches(name)`` is true when ``"<name> <keyword>"`` or
    ``"<keyword> <name>"`` occurs as a substring of the body. Each neighbour
    list is built once and sorted, so every lookup is a bisection instead of a
    scan of the whole body.
    """

    def __init__(self, masked_body: str, keyword: str) -> None:
        self._after = sorted(
            m.group(0) for m in re.finditer(rf"(?<={keyword} )\S+", masked_body)
        )
        # Stored reversed: "ends with name" becomes a prefix search
        self._before_reversed = sorted(
            m.group(0)[::-1] for m in re.finditer(rf"(?<!\S)\S+(?= {keyword})", masked_body)
        )

    @staticmethod
    def _has_prefix(words: list[str], prefix: str) -> bool:
        i = bisect_left(words, prefix)
        return i < len(words) and words[i].startswith(prefix)

    def touches(self, name: str) -> bool:
        return self._has_prefix(self._after, name) or self._has_prefix(
            self._before_reversed, name[::-1]
        )


def _build_state_variable(
    name: str,
    type_name: str,
    modifiers: list[str],
    constants: _KeywordNeighbours,
    immutables: _KeywordNeighbours,
) -> StateVariable:
    # Body-wide substring check: not scope-aware, can report false positives
    return StateVariable(
        name=name,
        type_name=type_name,
        visibility=next((m for m in modifiers if m in VISIBILITIES), "internal"),
        constant="constant" in modifiers or constants.touches(name),
        immutable="immutable" in modifiers or immutables.touches(name),
    )


def _split_function_type_variable(text: str) -> tuple[str, list[str], str] | None:
    """
    Return (type, modifiers, name) for `function (...) ... [public] name`.

    `internal` is left in the type: it is both a function-type visibility and
    the default variable visibility, so the result is the same either way.
    """
    if not _FUNCTION_TYPE_RE.match(text):
        return None
    tokens = text.partition("=")[0].split()
    name = tokens[-1]
    if not _IDENTIFIER_RE.match(name) or name in _FUNCTION_TAIL_KEYWORDS:
        return None

    end = len(tokens) - 1
    while end > 1 and tokens[end - 1] in ("public", "private", "constant", "immutable"):
        end -= 1
    return " ".join(tokens[:end]), tokens[end:-1], name


def _parse_state_variable(
    text: str, constants: _KeywordNeighbours, immutables: _KeywordNeighbours
) -> StateVariable | None:
    first_word = text.split(" ", 1)[0].split("(", 1)[0]
    if first_word == "function":
        split_fn = _split_function_type_variable(text)
        if split_fn is None:
            return None
        type_name, modifiers, name = split_fn
        return _build_state_variable(name, type_name, modifiers, constants, immutables)
    if first_word in _NON_VARIABLE_KEYWORDS:
        return None

    split = _split_type(text)
    if split is None:
        return None
    type_name, rest = split

    declaration = _OVERRIDE_RE.sub(" ", rest.partition("=")[0])
    tokens = declaration.split()
    if not tokens:
        return None
    name, modifiers = tokens[-1], tokens[:-1]
    if not _IDENTIFIER_RE.match(name) or name in _VARIABLE_MODIFIERS:
        return None
    if any(m not in _VARIABLE_MODIFIERS for m in modifiers):
        return None
    return _build_state_variable(name, type_name, modifiers, constants, immutables)


def extract_state_variables(masked_body: str) -> list[StateVariable]:
    """Return every contract-level variable declaration, in source order."""
    constants = _KeywordNeighbours(masked_body, "constant")
    immutables = _KeywordNeighbours(masked_body, "immutable")
    variables: list[StateVariable] = []
    for member in iter_members(masked_body):
        if member.terminator != ";":
            continue
        var = _parse_state_variable(member.text, constants, immutables)
        if var is not None:
            variables.append(var)
    return variables


# ── functions ──────────────────────────────────────────────────────────

def _parse_signature(name: str, text: str, open_index: int, **flags: bool) -> FunctionDef | None:
    group = _parenthesized(text, open_index)
    if group is None:
        return None
    params_text, rest = group

    returns: tuple[Parameter, ...] = ()
    head = rest
    returns_match = _RETURNS_RE.search(rest)
    if returns_match:
        head = rest[:returns_match.start()]
        returns_group = _parenthesized(rest, returns_match.end() - 1)
        if returns_group is not None:
            returns = parse_parameters(returns_group[0])

    if flags.get("is_constructor"):
        visibility = "public"
    elif flags.get("is_modifier"):
        visibility = "internal"
    else:
        visibility_match = _VISIBILITY_RE.search(head)
        visibility = visibility_match.group(1) if visibility_match else "public"
    mutability_match = _MUTABILITY_RE.search(head)

    return FunctionDef(
        name=name,
        visibility=visibility,
        state_mutability=mutability_match.group(1) if mutability_match else "nonpayable",
        parameters=parse_parameters(params_text),
        return_parameters=returns,
        is_constructor=flags.get("is_constructor", False),
        is_modifier=flags.get("is_modifier", False),
    )


def _parse_function_member(text: str) -> FunctionDef | None:
    match = _FUNCTION_RE.match(text)
    if match:
        # pre-0.6 `function() external payable` is the fallback
        return _parse_signature(match.group(1) or "fallback", text, match.end() - 1)

    match = _SPECIAL_RE.match(text)
    if match:
        return _parse_signature(match.group(1), text, match.end() - 1)

    match = _MODIFIER_RE.match(text)
    if match:
        if text[match.end():].startswith("("):
            return _parse_signature(match.group(1), text, match.end(), is_modifier=True)
        return FunctionDef(name=match.group(1), visibility="internal", is_modifier=True)
    return None


def extract_functions(masked_body: str) -> list[FunctionDef]:
    """
    Return function, modifier and constructor signatures.

    The constructor, when present, is always placed first regardless of where
    it appears in the body; downstream consumers treat index 0 as the
    constructor slot.
    """
    functions: list[FunctionDef] = []
    constructor: FunctionDef | None = None
    for member in iter_members(masked_body):
        if constructor is None and _CONSTRUCTOR_RE.match(member.text):
            constructor = _parse_signature(
                "constructor", member.text, member.text.index("("), is_constructor=True
            )
            continue
        if member.terminator == ";" and _split_function_type_variable(member.text):
            continue
        func = _parse_function_member(member.text)
        if func is not None:
            functions.append(func)

    if constructor is not None:
        functions.insert(0, constructor)
    return functions


# ── events ─────────────────────────────────────────────────────────────

def extract_events(masked_body: str) -> list[EventDef]:
    events: list[EventDef] = []
    for member in iter_members(masked_body):
        match = _EVENT_RE.match(member.text)
        if not match:
            continue
        group = _parenthesized(member.text, match.end() - 1)
        if group is None:
            continue
        events.append(EventDef(name=match.group(1), parameters=parse_event_parameters(group[0])))
    return events


def extract_contract(span: DeclarationSpan) -> ContractDef:
    """Build the full ContractDef for one scanned declaration."""
    return ContractDef(
        name=span.name,
        kind=span.kind,
        is_abstract=span.is_abstract,
        base_contracts=span.base_names,
        state_variables=tuple(extract_state_variables(span.masked_body)),
        functions=tuple(extract_functions(span.masked_body)),
        events=tuple(extract_events(span.masked_body)),
    )
