import pytest

from geodata_filenames import code_filename, sanitize, sanitize_timezone


def test_sanitize_lowercases_codes():
    assert sanitize("USA", "0") == "usa"
    assert sanitize("US-CA", "0") == "us-ca"


def test_sanitize_collapses_and_trims_dashes():
    assert sanitize("Northern America", "x") == "northern-america"
    assert sanitize("  Latin America & the Caribbean ", "x") == "latin-america-the-caribbean"
    assert sanitize("--autonomous  region--", "x") == "autonomous-region"


@pytest.mark.parametrize("raw", ["", None, 42, "!!!", "///", "  "])
def test_sanitize_falls_back_when_nothing_usable(raw):
    assert sanitize(raw, "17") == "17"


def test_sanitize_is_deterministic():
    assert sanitize("Île-de-France", "1") == sanitize("Île-de-France", "1") == "le-de-france"


def test_timezone_sanitizer_keeps_case_and_does_not_collapse():
    assert sanitize_timezone("Asia/Kabul", "x") == "Asia-Kabul"
    assert sanitize_timezone("America/Argentina/Buenos_Aires", "x") == "America-Argentina-Buenos-Aires"
    assert sanitize_timezone("Etc/GMT+10", "x") == "Etc-GMT-10"
    assert sanitize_timezone("A//B", "x") == "A--B"


def test_timezone_sanitizer_differs_from_general_rule():
    assert sanitize_timezone("Asia/Kabul", "x") != sanitize("Asia/Kabul", "x")


def test_timezone_sanitizer_fallback():
    assert sanitize_timezone("", "unknown") == "unknown"
    assert sanitize_timezone(None, "unknown") == "unknown"


def test_code_filename_uses_id_when_code_missing():
    assert code_filename("AF", 1) == "af"
    assert code_filename("", 3) == "3"
    assert code_filename(None, 30) == "30"
