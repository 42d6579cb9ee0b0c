import pytest

from dta_split.counter import count_spectra
from dta_split.exceptions import SourceFileError


def test_count_spectra(make_cdta):
    path = make_cdta(spectra=25)

    assert count_spectra(path) == 25


def test_count_is_idempotent(make_cdta):
    path = make_cdta(spectra=7, newline="\r\n")

    first = count_spectra(path)
    second = count_spectra(path)

    assert first == second == 7


def test_count_ignores_blank_lines_inside_records(make_cdta):
    path = make_cdta(spectra=5, inner_blank=True)

    assert count_spectra(path) == 5


def test_count_zero_when_no_separators(make_cdta):
    path = make_cdta(lines=["Hello world", "", "1234.5 2"])

    assert count_spectra(path) == 0


def test_count_missing_file_raises(tmp_path):
    with pytest.raises(SourceFileError):
        count_spectra(tmp_path / "missing_dta.txt")
