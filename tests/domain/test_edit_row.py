"""Tests for edit-row parsing (lcms_kernel/domain/edit_row.py)."""

import pytest

from lcms_kernel.domain.edit_row import (
    NULL_VALUE,
    EditRow,
    StandardIonHeader,
    parse_edit_row,
    parse_result_id,
)
from lcms_kernel.exceptions import MalformedInputError


def _raw(**cells) -> dict:
    return {StandardIonHeader[k].value: v for k, v in cells.items()}


class TestParseResultId:
    def test_integer(self):
        assert parse_result_id(_raw(STANDARD_ION_RESULT_ID="42"), 1) == 42

    def test_whitespace_stripped(self):
        assert parse_result_id(_raw(STANDARD_ION_RESULT_ID=" 42\t"), 1) == 42

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing(self, value):
        raw = {} if value is None else _raw(STANDARD_ION_RESULT_ID=value)
        with pytest.raises(MalformedInputError) as exc_info:
            parse_result_id(raw, 3)
        assert exc_info.value.reason == "missing result id"
        assert exc_info.value.source_row == 3
        assert exc_info.value.code == "MALFORMED_INPUT"

    @pytest.mark.parametrize("value", ["abc", "4.2", "NULL", "4_2", "\uff14\uff12", "0x2a", "+-4", "4 2"])
    def test_not_an_integer(self, value):
        with pytest.raises(MalformedInputError) as exc_info:
            parse_result_id(_raw(STANDARD_ION_RESULT_ID=value), 2)
        assert exc_info.value.reason == "not an integer"
        assert exc_info.value.raw_value == value

    @pytest.mark.parametrize("value, expected", [("+42", 42), ("-7", -7), ("007", 7)])
    def test_signed_and_padded(self, value, expected):
        assert parse_result_id(_raw(STANDARD_ION_RESULT_ID=value), 1) == expected

    def test_64_bit_bounds_accepted(self):
        assert parse_result_id(_raw(STANDARD_ION_RESULT_ID=str(2**63 - 1)), 1) == 2**63 - 1
        assert parse_result_id(_raw(STANDARD_ION_RESULT_ID=str(-(2**63))), 1) == -(2**63)

    @pytest.mark.parametrize("value", [str(2**63), str(-(2**63) - 1), "99999999999999999999"])
    def test_out_of_range(self, value):
        with pytest.raises(MalformedInputError) as exc_info:
            parse_result_id(_raw(STANDARD_ION_RESULT_ID=value), 4)
        assert exc_info.value.reason == "out of range"
        assert exc_info.value.source_row == 4


class TestParseEditRow:
    def test_full_row(self):
        raw = _raw(
            STANDARD_ION_RESULT_ID="42",
            CHEMICAL="caffeine",
            MANUAL_PICK="M+H",
            AUTHOR="bob",
            NOTE="clear peak",
        )
        assert parse_edit_row(raw, 1) == EditRow(
            source_row=1, result_id=42, manual_pick="M+H", note="clear peak"
        )

    def test_unknown_columns_ignored(self):
        raw = _raw(STANDARD_ION_RESULT_ID="1", MANUAL_PICK="M+Na")
        raw["EXTRA"] = "whatever"
        assert parse_edit_row(raw, 1).manual_pick == "M+Na"

    def test_null_pick_is_unset(self):
        edit = parse_edit_row(_raw(STANDARD_ION_RESULT_ID="1", MANUAL_PICK=NULL_VALUE), 1)
        assert edit.is_unset

    def test_empty_pick_is_not_unset(self):
        edit = parse_edit_row(_raw(STANDARD_ION_RESULT_ID="1", MANUAL_PICK=""), 1)
        assert not edit.is_unset
        assert edit.manual_pick == ""

    def test_missing_pick_column(self):
        with pytest.raises(MalformedInputError) as exc_info:
            parse_edit_row(_raw(STANDARD_ION_RESULT_ID="1"), 5)
        assert exc_info.value.field == "MANUAL_PICK"
        assert exc_info.value.source_row == 5

    @pytest.mark.parametrize("note", ["", "  ", "NULL"])
    def test_blank_or_null_note_is_none(self, note):
        edit = parse_edit_row(_raw(STANDARD_ION_RESULT_ID="1", MANUAL_PICK="M+H", NOTE=note), 1)
        assert edit.note is None

    def test_missing_note_column_is_none(self):
        edit = parse_edit_row(_raw(STANDARD_ION_RESULT_ID="1", MANUAL_PICK="M+H"), 1)
        assert edit.note is None


def test_header_order():
    assert StandardIonHeader.names() == (
        "STANDARD_ION_RESULT_ID",
        "CHEMICAL",
        "STANDARD_WELL_ID",
        "BEST_ION_FROM_ALGO",
        "MANUAL_PICK",
        "AUTHOR",
        "NOTE",
    )
