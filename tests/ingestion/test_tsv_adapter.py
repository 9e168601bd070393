"""Tests for the TSV source adapter."""

import tempfile
from pathlib import Path

from lcms_ingestion.adapters import SourceAdapter, SourceProbe, TsvSourceAdapter


def _write(content: str, encoding: str = "utf-8") -> Path:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".tsv", delete=False, newline="", encoding=encoding) as f:
        f.write(content)
        return Path(f.name)


class TestTsvSourceAdapter:
    """TSV adapter: read and probe with delimiter, encoding, skip_rows."""

    def test_implements_protocol(self):
        assert isinstance(TsvSourceAdapter(), SourceAdapter)

    def test_read_with_header_yields_dicts(self):
        path = _write("STANDARD_ION_RESULT_ID\tMANUAL_PICK\n42\tM+H\n43\tNULL\n")
        try:
            rows = list(TsvSourceAdapter().read(path, {}))
            assert rows == [
                {"STANDARD_ION_RESULT_ID": "42", "MANUAL_PICK": "M+H"},
                {"STANDARD_ION_RESULT_ID": "43", "MANUAL_PICK": "NULL"},
            ]
        finally:
            path.unlink()

    def test_commas_are_not_delimiters(self):
        path = _write("ID\tNOTE\n1\tpeak a, peak b\n")
        try:
            rows = list(TsvSourceAdapter().read(path, {}))
            assert rows == [{"ID": "1", "NOTE": "peak a, peak b"}]
        finally:
            path.unlink()

    def test_column_order_independent(self):
        path = _write("MANUAL_PICK\tSTANDARD_ION_RESULT_ID\nM+Na\t7\n")
        try:
            (row,) = TsvSourceAdapter().read(path, {})
            assert row["STANDARD_ION_RESULT_ID"] == "7"
            assert row["MANUAL_PICK"] == "M+Na"
        finally:
            path.unlink()

    def test_bom_stripped(self):
        path = _write("\ufeffSTANDARD_ION_RESULT_ID\tMANUAL_PICK\n1\tM+H\n")
        try:
            (row,) = TsvSourceAdapter().read(path, {})
            assert "STANDARD_ION_RESULT_ID" in row
        finally:
            path.unlink()

    def test_blank_lines_skipped(self):
        path = _write("A\tB\n1\t2\n\t\n3\t4\n")
        try:
            rows = list(TsvSourceAdapter().read(path, {}))
            assert [r["A"] for r in rows] == ["1", "3"]
        finally:
            path.unlink()

    def test_short_row_yields_none_for_missing_cells(self):
        path = _write("A\tB\tC\n1\t2\n")
        try:
            (row,) = TsvSourceAdapter().read(path, {})
            assert row == {"A": "1", "B": "2", "C": None}
        finally:
            path.unlink()

    def test_skip_rows(self):
        path = _write("# exported table\nA\tB\n1\t2\n")
        try:
            rows = list(TsvSourceAdapter().read(path, {"skip_rows": 1}))
            assert rows == [{"A": "1", "B": "2"}]
        finally:
            path.unlink()

    def test_custom_delimiter(self):
        path = _write("A;B\n1;2\n")
        try:
            rows = list(TsvSourceAdapter().read(path, {"delimiter": ";"}))
            assert rows == [{"A": "1", "B": "2"}]
        finally:
            path.unlink()

    def test_latin1_encoding(self):
        path = _write("CHEMICAL\tNOTE\nacide\tpic confirmé\n", encoding="latin-1")
        try:
            (row,) = TsvSourceAdapter().read(path, {"encoding": "latin-1"})
            assert row["NOTE"] == "pic confirmé"
        finally:
            path.unlink()


class TestTsvProbe:
    def test_probe_returns_row_count_and_columns(self):
        path = _write("X\tY\n1\t2\n3\t4\n5\t6\n")
        try:
            probe = TsvSourceAdapter().probe(path, {})
            assert isinstance(probe, SourceProbe)
            assert probe.row_count == 3
            assert probe.columns == ("X", "Y")
            assert len(probe.sample_rows) == 3
            assert probe.detected_delimiter == "\t"
        finally:
            path.unlink()

    def test_probe_samples_first_five(self):
        body = "".join(f"{i}\tv{i}\n" for i in range(10))
        path = _write("ID\tV\n" + body)
        try:
            probe = TsvSourceAdapter().probe(path, {})
            assert probe.row_count == 10
            assert [r["ID"] for r in probe.sample_rows] == ["0", "1", "2", "3", "4"]
        finally:
            path.unlink()

    def test_probe_empty_file(self):
        path = _write("")
        try:
            probe = TsvSourceAdapter().probe(path, {})
            assert probe.row_count == 0
            assert probe.columns == ()
        finally:
            path.unlink()

    def test_probe_count_matches_read(self):
        path = _write("A\tB\n1\t2\n\t\n \t \n3\t4\n")
        try:
            adapter = TsvSourceAdapter()
            probe = adapter.probe(path, {})
            assert probe.row_count == len(list(adapter.read(path, {}))) == 2
            assert [r["A"] for r in probe.sample_rows] == ["1", "3"]
        finally:
            path.unlink()

    def test_probe_missing_columns(self):
        path = _write("STANDARD_ION_RESULT_ID\tNOTE\n1\tx\n")
        try:
            probe = TsvSourceAdapter().probe(path, {})
            assert probe.missing_columns(["STANDARD_ION_RESULT_ID", "MANUAL_PICK"]) == ("MANUAL_PICK",)
            assert probe.missing_columns(["NOTE"]) == ()
        finally:
            path.unlink()
