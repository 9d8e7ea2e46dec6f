"""Tests for source-view helpers shared by detectors."""

from __future__ import annotations

import pytest

from susbot.detectors.common import (
    PragmaRange,
    build_source_view,
    extract_functions,
    find_block_end,
    parse_pragma_ranges,
    parse_version,
    statement_prefix,
    strip_noise,
)


def test_strip_noise_blanks_comments_and_strings() -> None:
    source = 'a /* hidden\nblock */ b // trailing note\nc = "tx.origin";'

    cleaned = strip_noise(source)

    assert "hidden" not in cleaned
    assert "trailing" not in cleaned
    assert "tx.origin" not in cleaned
    assert '""' in cleaned
    assert cleaned.count("\n") == source.count("\n")


def test_strip_noise_keeps_escaped_quotes_inside_strings() -> None:
    cleaned = strip_noise("x = 'it\\'s'; y = 1;")

    assert cleaned == "x = ''; y = 1;"


def test_find_block_end_handles_nesting() -> None:
    text = "{ a { b } c }"

    assert find_block_end(text, 0) == len(text) - 1
    assert find_block_end(text, 4) == 8


def test_find_block_end_unbalanced_returns_length() -> None:
    assert find_block_end("{ open", 0) == len("{ open")


def test_extract_functions_finds_special_functions() -> None:
    source = """
    contract A {
        constructor() { }
        receive() external payable { }
        fallback() external { }
        function run(uint256 x) public returns (uint256) { return x; }
    }
    """

    functions = extract_functions(source)

    assert [fn.name for fn in functions] == ["constructor", "receive", "fallback", "run"]
    assert functions[0].is_constructor is True
    assert functions[3].param_names == frozenset({"x"})


def test_legacy_constructor_named_after_contract() -> None:
    view = build_source_view("contract Wallet { function Wallet() { } function pay() { } }")

    by_name = {fn.name: fn for fn in view.functions}

    assert by_name["Wallet"].is_constructor is True
    assert by_name["Wallet"].is_entry_point is False
    assert by_name["pay"].is_entry_point is True


def test_visibility_and_read_only() -> None:
    view = build_source_view(
        """
        contract A {
            function a() internal { }
            function b() external view returns (uint256) { return 1; }
        }
        """
    )

    first, second = view.functions

    assert first.visibility == "internal"
    assert first.is_entry_point is False
    assert second.visibility == "external"
    assert second.is_read_only is True


def test_custom_modifier_with_sender_check_is_a_guard() -> None:
    view = build_source_view(
        """
        contract A {
            address keeper;
            modifier keeperGated() { require(msg.sender == keeper); _; }
            function poke() external keeperGated { }
            function open() external { }
        }
        """
    )

    poke, open_fn = view.functions

    assert "keeperGated" in view.guard_modifiers
    assert view.has_access_guard(poke) is True
    assert view.has_access_guard(open_fn) is False
    assert [fn.name for fn in view.exposed_functions()] == ["open"]


def test_owner_guard_recognises_owner_comparison() -> None:
    view = build_source_view(
        """
        contract A {
            address owner;
            function freeze() external { require(msg.sender == owner); }
        }
        """
    )

    assert view.has_owner_guard(view.functions[0]) is True


def test_statement_prefix_stops_at_previous_statement() -> None:
    text = "uint a = 1; (bool ok, ) = to.call(data);"

    assert statement_prefix(text, text.index(".call")) == " (bool ok, ) = to"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("0.8", (0, 8, 0)), ("0.4.11", (0, 4, 11)), ("1", (1, 0, 0))],
)
def test_parse_version_pads(raw: str, expected: tuple[int, int, int]) -> None:
    assert parse_version(raw) == expected


@pytest.mark.parametrize(
    ("expression", "expected"),
    [
        ("^0.4.11", (PragmaRange((0, 4, 11), True),)),
        (">=0.4.22 <0.9.0", (PragmaRange((0, 4, 22), True),)),
        (">=0.8.0", (PragmaRange((0, 8, 0), False),)),
        ("<0.9.0", (PragmaRange((0, 0, 0), True),)),
        ("*", (PragmaRange((0, 0, 0), False),)),
        ("^0.5.0 || ^0.8.0", (PragmaRange((0, 5, 0), True), PragmaRange((0, 8, 0), True))),
    ],
)
def test_parse_pragma_ranges(expression: str, expected: tuple[PragmaRange, ...]) -> None:
    assert parse_pragma_ranges(expression) == expected


def test_privileged_guard_ignores_zero_address_sender_check() -> None:
    view = build_source_view(
        """
        contract A {
            address keeper;
            modifier keeperGated() { require(msg.sender == keeper); _; }
            function poke() external keeperGated { }
            function nonzero() external { require(msg.sender != address(0)); }
            function origin() external { require(tx.origin == msg.sender); }
            function revertStyle() external { if (msg.sender != keeper) revert(); }
        }
        """
    )

    poke, nonzero, origin, revert_style = view.functions

    assert "keeperGated" in view.privileged_modifiers
    assert view.has_privileged_guard(poke) is True
    assert view.has_privileged_guard(revert_style) is True
    assert view.has_access_guard(nonzero) is True
    assert view.has_privileged_guard(nonzero) is False
    assert view.has_privileged_guard(origin) is False
    assert [fn.name for fn in view.exposed_functions(privileged_only=True)] == ["nonzero", "origin"]
