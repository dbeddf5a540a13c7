"""Unit tests for the tidy coordinate parser.

Tests cover:
1) Each stage in isolation (line breaks, header split, id assignment,
   pair split, pair parsing).
2) End-to-end scenarios on small dumps, including malformed input.
3) Ordering guarantees that path rendering relies on.
"""

from __future__ import annotations

import pytest

from tidyshapes.core.contracts.shapes import PairToken, ShapeBlock
from tidyshapes.core.errors import EmptyInputError, FormatError, ParseError, TidyShapesError
from tidyshapes.parsing.parser import (
    TidyCoordinateParser,
    assign_shape_ids,
    find_shape_headers,
    normalize_whitespace,
    parse_pair,
    parse_text,
    split_block_into_pairs,
    split_into_shape_blocks,
)

SCENARIO_A = "# Shape 01(1,2) , (3,4)# Shape 02(5,6)"


# ---------------------------------------------------------------------
# normalize_whitespace
# ---------------------------------------------------------------------


def test_normalize_whitespace_removes_every_line_break() -> None:
    """All line-break flavours go; spaces and tabs stay."""
    text = "a\nb\r\nc\rd e\x0bf \tg\x0ch\x1ci\x1dj\x1ek\x85l\u2028m\u2029n"
    assert normalize_whitespace(text) == "abcd ef \tghijklmn"


def test_normalize_whitespace_is_idempotent() -> None:
    """Applying the normalization twice equals applying it once."""
    text = "# Shape 01(1,2)\n , (3,4)\r\n"
    once = normalize_whitespace(text)
    assert normalize_whitespace(once) == once
    assert "\n" not in once and "\r" not in once


# ---------------------------------------------------------------------
# split_into_shape_blocks / assign_shape_ids
# ---------------------------------------------------------------------


@pytest.mark.parametrize("n", [1, 2, 5])
def test_split_yields_preamble_plus_one_block_per_header(n: int) -> None:
    """N headers produce N+1 fragments, the first being the preamble."""
    text = "".join(f"# Shape {i:02d}({i},{i})" for i in range(1, n + 1))
    fragments = split_into_shape_blocks(text)
    assert len(fragments) == n + 1
    assert fragments[0] == ""


def test_split_keeps_non_empty_preamble_in_slot_zero() -> None:
    """Text before the first header lands in fragment 0 only."""
    fragments = split_into_shape_blocks("exported by tool v2 # Shape 01(1,2)")
    assert fragments == ["exported by tool v2 ", "(1,2)"]


def test_header_pattern_is_loose() -> None:
    """Any punctuation lead, optional blanks and any two alphanumerics match."""
    text = "#Shape01(1,1)* Shape AB(2,2)@ShapeX9(3,3)"
    assert find_shape_headers(text) == ["#Shape01", "* Shape AB", "@ShapeX9"]
    assert split_into_shape_blocks(text)[1:] == ["(1,1)", "(2,2)", "(3,3)"]


def test_assign_shape_ids_drops_preamble_and_numbers_from_one() -> None:
    """Ids are 1..N with no gaps; the preamble never becomes a shape."""
    blocks = assign_shape_ids(["preamble", "(1,2)", "(3,4)", "(5,6)"])
    assert [b.shape_id for b in blocks] == [1, 2, 3]
    assert [b.text for b in blocks] == ["(1,2)", "(3,4)", "(5,6)"]


def test_assign_shape_ids_rejects_header_count_mismatch() -> None:
    """Headers, when given, must line up one-to-one with bodies."""
    with pytest.raises(ValueError):
        assign_shape_ids(["", "(1,2)"], headers=["# Shape 01", "# Shape 02"])


def test_header_digits_do_not_decide_shape_ids() -> None:
    """Occurrence order wins over the digits written in the header."""
    table = parse_text("# Shape 09(1,1)# Shape 03(2,2)# Shape 09(3,3)")
    assert table.to_rows() == [(1, 1.0, 1.0), (2, 2.0, 2.0), (3, 3.0, 3.0)]


# ---------------------------------------------------------------------
# split_block_into_pairs
# ---------------------------------------------------------------------


def test_split_block_preserves_order_and_round_trips() -> None:
    """Token count equals segment count and joining restores the body."""
    block = ShapeBlock(shape_id=4, text="(1,2) , (3,4) , (5,6)")
    tokens = split_block_into_pairs(block)

    assert [t.text for t in tokens] == ["(1,2)", "(3,4)", "(5,6)"]
    assert [t.offset for t in tokens] == [0, 1, 2]
    assert {t.shape_id for t in tokens} == {4}
    assert " , ".join(t.text for t in tokens) == block.text


def test_split_block_rejects_empty_body() -> None:
    """A header immediately followed by another header has no pairs."""
    with pytest.raises(FormatError) as ei:
        split_block_into_pairs(ShapeBlock(shape_id=2, header="# Shape 02", text="  "))
    assert ei.value.stage == "pair-split"
    assert ei.value.shape_id == 2


# ---------------------------------------------------------------------
# parse_pair
# ---------------------------------------------------------------------


def test_parse_pair_clean_input() -> None:
    """The canonical example parses to floats."""
    assert parse_pair("(1,2)") == (1.0, 2.0)


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("(-1.5,.25)", (-1.5, 0.25)),
        ("[3,4]", (3.0, 4.0)),
        (" ( 10 , -20 ) ", (10.0, -20.0)),
        ("1,2", (1.0, 2.0)),
        ("(+1e2,2E-1)", (100.0, 0.2)),
    ],
)
def test_parse_pair_trims_only_outer_wrappers(token: str, expected: tuple[float, float]) -> None:
    """Signs, decimal points and exponents survive the wrapper trim."""
    assert parse_pair(token) == expected


def test_parse_pair_empty_y_field_is_a_parse_error() -> None:
    """``(1,)`` fails on the y field, not silently to a default."""
    with pytest.raises(ParseError) as ei:
        parse_pair("(1,)")
    assert ei.value.field == "y"
    assert ei.value.stage == "numeric-parse"
    assert "empty y field" in str(ei.value)


@pytest.mark.parametrize("token", ["((1,2)", "(1;5,2)", "(nan,2)", "(inf,2)", "(1e999,2)", "(a,2)"])
def test_parse_pair_rejects_non_numeric_x(token: str) -> None:
    """Only one wrapper is trimmed; anything else must be a finite literal."""
    with pytest.raises(ParseError) as ei:
        parse_pair(token)
    assert ei.value.field == "x"


@pytest.mark.parametrize("token", ["(1)", "(1,2,3)", ""])
def test_parse_pair_requires_exactly_one_comma(token: str) -> None:
    """Tokens that are not two fields are a structural error."""
    with pytest.raises(FormatError) as ei:
        parse_pair(token)
    assert ei.value.stage == "pair-split"


def test_parse_pair_error_carries_location_from_token() -> None:
    """Errors raised from a PairToken report its shape and offset."""
    token = PairToken(shape_id=3, offset=7, text="(1,x)")
    with pytest.raises(ParseError) as ei:
        parse_pair(token)
    err = ei.value
    assert (err.shape_id, err.pair_offset, err.raw) == (3, 7, "x")
    assert "shape 3, pair 7" in str(err)


# ---------------------------------------------------------------------
# End-to-end
# ---------------------------------------------------------------------


def test_scenario_a_two_shapes() -> None:
    """Records come out shape by shape, pairs in source order."""
    table = TidyCoordinateParser().run(SCENARIO_A)
    assert table.to_rows() == [(1, 1.0, 2.0), (1, 3.0, 4.0), (2, 5.0, 6.0)]


def test_scenario_b_line_breaks_inside_body() -> None:
    """Line breaks inside a body do not change any value."""
    table = parse_text("# Shape 01(1,2)\n , (3,4)")
    assert table.to_rows() == [(1, 1.0, 2.0), (1, 3.0, 4.0)]


def test_scenario_c_malformed_pair_aborts_run() -> None:
    """A bad pair fails the whole run and points at where it was."""
    with pytest.raises(ParseError) as ei:
        parse_text("# Shape 01(1,2) , (1,)# Shape 02(5,6)")
    assert ei.value.field == "y"
    assert (ei.value.shape_id, ei.value.pair_offset) == (1, 1)


@pytest.mark.parametrize("text", ["", "   \n ", "(1,2) , (3,4) with no headers"])
def test_scenario_d_no_headers_is_empty_input(text: str) -> None:
    """Empty text and header-less text raise EmptyInputError, not an empty table."""
    with pytest.raises(EmptyInputError):
        parse_text(text)


def test_empty_input_error_is_distinct_but_catchable_as_format_error() -> None:
    """Callers may catch the specific class or the broader families."""
    with pytest.raises(FormatError):
        parse_text("")
    with pytest.raises(TidyShapesError):
        parse_text("")


def test_preamble_and_trailing_whitespace_are_ignored() -> None:
    """A leading description and a trailing newline do not produce rows."""
    text = "Drawing: house\n# Shape 01(0,0) , (2,0) , (1,1)\n# Shape 02(0.5,0) , (0.5,0.5)\n"
    table = parse_text(text)
    assert table.shape_ids() == [1, 2]
    assert table.summary() == {1: 3, 2: 2}


def test_custom_marker_and_delimiter() -> None:
    """The header word and pair separator are configurable."""
    parser = TidyCoordinateParser(marker="Poly", pair_delimiter=" ; ")
    table = parser.run("% Poly 1a(1,1) ; (2,2)")
    assert table.to_rows() == [(1, 1.0, 1.0), (1, 2.0, 2.0)]


def test_run_is_deterministic() -> None:
    """The parser keeps no state between runs."""
    parser = TidyCoordinateParser()
    assert parser.run(SCENARIO_A) == parser.run(SCENARIO_A)


def test_parallel_normalization_keeps_sequential_order() -> None:
    """Thread-pool parsing returns rows in the same order as sequential parsing."""
    text = "".join(
        f"# Shape {i % 100:02d}" + " , ".join(f"({i},{j})" for j in range(i % 7 + 1))
        for i in range(1, 40)
    )
    sequential = TidyCoordinateParser(max_workers=1).run(text)
    parallel = TidyCoordinateParser(max_workers=8).run(text)

    assert parallel.to_rows() == sequential.to_rows()
    shapes = [r.shape for r in parallel.records]
    assert shapes == sorted(shapes)
    assert parallel.shape_ids() == list(range(1, 40))


def test_parallel_normalization_reports_first_failing_block() -> None:
    """Errors from worker threads propagate with their location."""
    parser = TidyCoordinateParser(max_workers=4)
    with pytest.raises(ParseError) as ei:
        parser.run("# Shape 01(1,2)# Shape 02(3,q)# Shape 03(5,6)")
    assert ei.value.shape_id == 2


def test_parse_text_accepts_parser_options() -> None:
    """The shortcut forwards marker, delimiter and worker count."""
    table = parse_text(
        "% Poly 1a(1,1) ; (2,2)% Poly 2b(3,3)", marker="Poly", pair_delimiter=" ; ", max_workers=2
    )
    assert table.to_rows() == [(1, 1.0, 1.0), (1, 2.0, 2.0), (2, 3.0, 3.0)]
