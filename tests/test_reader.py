# tests/test_reader.py
import pytest

from core.reader import read_csv_file


def test_reads_numeric_rows(tmp_path):
    path = tmp_path / "in.csv"
    path.write_text("1,2.5,-3\n4e-1, 5 ,6\n")
    assert read_csv_file(str(path)) == [[1.0, 2.5, -3.0], [0.4, 5.0, 6.0]]


def test_skips_blank_lines(tmp_path):
    path = tmp_path / "in.csv"
    path.write_text("\n1,0\n,\n\n0,1\n")
    assert read_csv_file(str(path)) == [[1.0, 0.0], [0.0, 1.0]]


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_csv_file(str(tmp_path / "nope.csv"))


def test_bad_cell_reports_line(tmp_path):
    path = tmp_path / "in.csv"
    path.write_text("1,2\n3,abc\n")
    with pytest.raises(ValueError, match=r"in\.csv:2"):
        read_csv_file(str(path))
