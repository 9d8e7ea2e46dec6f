"""Shared source-view helpers for detector implementations.

Detectors never parse Solidity. They work on a ``SourceView``: the source
with comments and string literals blanked, plus a flat list of function
blocks located by header pattern and brace matching.
"""

from __future__ import annotations

import re
from typing import TypeAlias
from dataclasses import dataclass
from functools import cached_property

from susbot.constants.detectors import (
    CONTRACT_NAME_PATTERN,
    FUNCTION_HEADER_PATTERN,
    GUARD_BODY_PATTERN,
    GUARD_MODIFIER_PATTERN,
    MODIFIER_DEFINITION_PATTERN,
    OWNER_STYLE_BODY_PATTERN,
    OWNER_STYLE_MODIFIER_PATTERN,
    PARAM_NAME_PATTERN,
    PRAGMA_CONSTRAINT_PATTERN,
    PRIVILEGED_BODY_PATTERN,
    READ_ONLY_PATTERN,
    SOURCE_NOISE_PATTERN,
    VISIBILITY_PATTERN,
)

VersionTuple: TypeAlias = tuple[int, int, int]

_LOWER_BOUND_OPS: frozenset[str] = frozenset({"^", "~", "=", ">=", ">"})
_UPPER_BOUND_OPS: frozenset[str] = frozenset({"^", "~", "=", "<", "<="})


@dataclass(frozen=True)
class FunctionBlock:
    """A function, constructor, fallback or receive body located in source."""

    name: str
    params: str
    header: str
    body: str
    start: int
    end: int
    is_constructor: bool = False

    @property
    def visibility(self) -> str | None:
        match = VISIBILITY_PATTERN.search(self.header)
        return match.group(1) if match else None

    @property
    def is_read_only(self) -> bool:
        return READ_ONLY_PATTERN.search(self.header) is not None

    @property
    def is_entry_point(self) -> bool:
        """Whether any account can call this function directly after deployment.

        A missing visibility keyword means public in pre-0.5 compilers.
        """
        if self.is_constructor:
            return False
        return self.visibility in (None, "public", "external")

    @cached_property
    def param_names(self) -> frozenset[str]:
        names: set[str] = set()
        for raw_param in _split_params(self.params):
            match = PARAM_NAME_PATTERN.search(raw_param)
            if match and " " in raw_param.strip():
                names.add(match.group(1))
        return frozenset(names)

    def calls(self, function_name: str) -> bool:
        """Return True when the body contains a call to *function_name*."""
        return re.search(rf"\b{re.escape(function_name)}\s*\(", self.body) is not None


@dataclass(frozen=True)
class SourceView:
    """Cleaned source text with located functions and access-guard modifiers."""

    text: str
    functions: tuple[FunctionBlock, ...]
    guard_modifiers: frozenset[str]
    owner_modifiers: frozenset[str]
    privileged_modifiers: frozenset[str] = frozenset()

    def has_access_guard(self, function: FunctionBlock) -> bool:
        """Return True when the function is restricted to privileged callers."""
        if GUARD_MODIFIER_PATTERN.search(function.header):
            return True
        if _mentions_any(function.header, self.guard_modifiers):
            return True
        return GUARD_BODY_PATTERN.search(function.body) is not None

    def has_owner_guard(self, function: FunctionBlock) -> bool:
        """Return True when a single owner/admin address gates the function."""
        if OWNER_STYLE_MODIFIER_PATTERN.search(function.header):
            return True
        if _mentions_any(function.header, self.owner_modifiers):
            return True
        return OWNER_STYLE_BODY_PATTERN.search(function.body) is not None

    def has_privileged_guard(self, function: FunctionBlock) -> bool:
        """Return True when only an owner or role holder can run the function.

        Stricter than `has_access_guard`: sender checks against ``address(0)``
        or ``tx.origin`` do not count.
        """
        if GUARD_MODIFIER_PATTERN.search(function.header):
            return True
        if _mentions_any(function.header, self.privileged_modifiers):
            return True
        return PRIVILEGED_BODY_PATTERN.search(function.body) is not None

    def exposed_functions(self, *, privileged_only: bool = False) -> tuple[FunctionBlock, ...]:
        """Functions anyone can reach: unguarded entry points and internals they call.

        With *privileged_only*, only owner or role guards count as protection.
        """
        is_guarded = self.has_privileged_guard if privileged_only else self.has_access_guard
        entry_points = [fn for fn in self.functions if fn.is_entry_point and not is_guarded(fn)]
        exposed: dict[int, FunctionBlock] = {fn.start: fn for fn in entry_points}
        for function in self.functions:
            if function.start in exposed or function.is_entry_point or function.is_constructor:
                continue
            if is_guarded(function):
                continue
            if any(entry.calls(function.name) for entry in entry_points):
                exposed[function.start] = function
        return tuple(exposed[start] for start in sorted(exposed))

    def outside_functions(self, pattern: re.Pattern[str]) -> bool:
        """Return True when *pattern* matches source not covered by any function body."""
        for match in pattern.finditer(self.text):
            if not any(fn.start <= match.start() < fn.end for fn in self.functions):
                return True
        return False


def build_source_view(source_text: str) -> SourceView:
    """Blank comments and strings, then locate functions and guard modifiers."""
    text = strip_noise(source_text)
    contract_names = frozenset(CONTRACT_NAME_PATTERN.findall(text))
    guard_modifiers: set[str] = set()
    owner_modifiers: set[str] = set()
    privileged_modifiers: set[str] = set()
    for match in MODIFIER_DEFINITION_PATTERN.finditer(text):
        body = text[match.end() : find_block_end(text, match.end() - 1)]
        if GUARD_BODY_PATTERN.search(body):
            guard_modifiers.add(match.group("name"))
        if OWNER_STYLE_BODY_PATTERN.search(body):
            owner_modifiers.add(match.group("name"))
        if PRIVILEGED_BODY_PATTERN.search(body):
            privileged_modifiers.add(match.group("name"))
    return SourceView(
        text=text,
        functions=extract_functions(text, contract_names),
        guard_modifiers=frozenset(guard_modifiers),
        owner_modifiers=frozenset(owner_modifiers),
        privileged_modifiers=frozenset(privileged_modifiers),
    )


def strip_noise(source_text: str) -> str:
    """Replace comments with whitespace and string literals with empty literals.

    Newlines inside block comments are kept so offsets stay line-aligned.
    """

    def _replace(match: re.Match[str]) -> str:
        if match.group("string") is not None:
            return match.group("string")[0] * 2
        if match.group("block") is not None:
            return " " + "\n" * match.group("block").count("\n")
        return ""

    return SOURCE_NOISE_PATTERN.sub(_replace, source_text)


def extract_functions(text: str, contract_names: frozenset[str] = frozenset()) -> tuple[FunctionBlock, ...]:
    """Locate function-like blocks by header pattern and brace matching."""
    functions: list[FunctionBlock] = []
    for match in FUNCTION_HEADER_PATTERN.finditer(text):
        special = match.group("special")
        name = match.group("name") or special or "fallback"
        end = find_block_end(text, match.end() - 1)
        functions.append(
            FunctionBlock(
                name=name,
                params=match.group("params"),
                header=match.group("header"),
                body=text[match.end() : end],
                start=match.start(),
                end=end,
                is_constructor=special == "constructor" or name in contract_names,
            )
        )
    return tuple(functions)


def find_block_end(text: str, open_index: int) -> int:
    """Return the index of the brace closing the block opened at *open_index*.

    Unbalanced input returns ``len(text)``.
    """
    depth = 0
    for index in range(open_index, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return len(text)


def statement_prefix(text: str, position: int) -> str:
    """Return the text between the start of the enclosing statement and *position*."""
    start = max(text.rfind(";", 0, position), text.rfind("{", 0, position), text.rfind("}", 0, position))
    return text[start + 1 : position]


def parse_version(raw: str) -> VersionTuple:
    """Parse ``MAJOR[.MINOR[.PATCH]]`` into a padded tuple."""
    parts = [int(part) for part in raw.split(".")[:3]]
    while len(parts) < 3:
        parts.append(0)
    return parts[0], parts[1], parts[2]


def format_version(version: VersionTuple) -> str:
    return ".".join(str(part) for part in version)


@dataclass(frozen=True)
class PragmaRange:
    """Lowest admitted version of one pragma range and whether it has an upper bound."""

    lowest: VersionTuple
    bounded: bool


def parse_pragma_ranges(expression: str) -> tuple[PragmaRange, ...]:
    """Parse a ``pragma solidity`` expression into its ``||``-separated ranges."""
    ranges: list[PragmaRange] = []
    for alternative in expression.split("||"):
        lower: list[VersionTuple] = []
        bounded = False
        unbounded_wildcard = False
        for match in PRAGMA_CONSTRAINT_PATTERN.finditer(alternative):
            operator = match.group("op") or "="
            raw_version = match.group("version")
            if raw_version == "*":
                unbounded_wildcard = True
                continue
            version = parse_version(raw_version)
            if operator in _LOWER_BOUND_OPS:
                lower.append(version)
            if operator in _UPPER_BOUND_OPS:
                bounded = True
        if not lower and not bounded and not unbounded_wildcard:
            continue
        ranges.append(
            PragmaRange(
                lowest=min(lower) if lower else (0, 0, 0),
                bounded=bounded and not unbounded_wildcard,
            )
        )
    return tuple(ranges)


def _split_params(params: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in params:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    if "".join(current).strip():
        parts.append("".join(current))
    return parts


def _mentions_any(text: str, names: frozenset[str]) -> bool:
    return any(re.search(rf"\b{re.escape(name)}\b", text) for name in names)
