"""Tests for reading uploaded study material."""

from exam_genai.materials import ACCEPTED_EXTENSIONS, read_study_material


def test_utf8_text_is_returned_verbatim():
    text = "# Notes\nλ-calculus and O(n²)\n"
    assert read_study_material(text.encode("utf-8"), filename="notes.md") == text


def test_byte_order_mark_is_dropped():
    assert read_study_material(b"\xef\xbb\xbfint main() {}", filename="main.c") == "int main() {}"


def test_undecodable_upload_is_a_no_op(caplog):
    with caplog.at_level("WARNING", logger="exam_genai.materials"):
        assert read_study_material(b"\x89PNG\r\n\x1a\n\xff\xfe", filename="diagram.png") is None
    assert "diagram.png" in caplog.text


def test_accepted_extensions_are_text_formats():
    assert "py" in ACCEPTED_EXTENSIONS and "md" in ACCEPTED_EXTENSIONS
    assert "pdf" not in ACCEPTED_EXTENSIONS
