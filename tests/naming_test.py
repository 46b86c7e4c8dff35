from datetime import datetime

from app.services.naming import default_name, output_filename, resolve_output_name

NOW = datetime(2024, 3, 5, 23, 59)


def test_default_name_is_zero_padded_date():
    assert default_name(NOW) == "merged_20240305"
    assert default_name(datetime(2025, 11, 30)) == "merged_20251130"


def test_blank_input_resolves_to_default():
    assert resolve_output_name("", NOW) == resolve_output_name("   ", NOW) == default_name(NOW)
    assert resolve_output_name(None, NOW) == default_name(NOW)


def test_user_input_is_trimmed_and_kept_verbatim():
    assert resolve_output_name("report", NOW) == "report"
    assert resolve_output_name("  quarterly report \t", NOW) == "quarterly report"


def test_special_characters_are_not_sanitized():
    assert resolve_output_name("../a/b:c", NOW) == "../a/b:c"


def test_output_filename_appends_extension():
    assert output_filename("report", "pdf", NOW) == "report.pdf"
    assert output_filename(" ", ".pdf", NOW) == "merged_20240305.pdf"
