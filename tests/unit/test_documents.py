"""
Unit tests for document containers and data URI helpers.
"""
import base64

import pytest

from doctranslate.core.documents import (
    DocumentFile,
    build_data_uri,
    data_uri_payload,
    get_unique_output_path,
    guess_mime_type,
    parse_data_uri,
    translated_filename,
)
from doctranslate.core.exceptions import FileReadError, InvalidDataUriError


class TestDataUri:
    """Tests for data URI encoding and decoding."""

    def test_build_and_parse(self):
        uri = build_data_uri(b"hello", "text/plain")
        assert uri == "data:text/plain;base64," + base64.b64encode(b"hello").decode()
        assert parse_data_uri(uri) == ("text/plain", b"hello")

    def test_parse_with_parameters(self):
        uri = "data:text/plain;charset=utf-8;base64," + base64.b64encode(b"hi").decode()
        assert parse_data_uri(uri) == ("text/plain", b"hi")

    def test_payload(self):
        uri = build_data_uri(b"abc", "application/pdf")
        assert data_uri_payload(uri) == base64.b64encode(b"abc").decode()

    @pytest.mark.parametrize("uri", [
        "",
        "not a data uri",
        "data:text/plain,hello",
        "data:text/plain;base64,***",
    ])
    def test_invalid(self, uri):
        with pytest.raises(InvalidDataUriError):
            parse_data_uri(uri)


class TestMimeTypes:
    """Tests for MIME type guessing."""

    @pytest.mark.parametrize("filename, expected", [
        ("report.docx", "application/vnd.openxmlformats-officedocument.wordprocessingml.document"),
        ("REPORT.PDF", "application/pdf"),
        ("notes.txt", "text/plain"),
        ("scan.png", "image/png"),
        ("mystery", "application/octet-stream"),
    ])
    def test_guess(self, filename, expected):
        assert guess_mime_type(filename) == expected


class TestDocumentFile:
    """Tests for DocumentFile."""

    def test_from_bytes_guesses_mime(self):
        document = DocumentFile.from_bytes(b"data", "slides.pptx")
        assert document.mime_type.endswith("presentationml.presentation")
        assert document.size == 4

    def test_data_uri_round_trip(self):
        document = DocumentFile.from_bytes(b"%PDF-1.4", "a.pdf")
        restored = DocumentFile.from_data_uri(document.data_uri, "a.pdf")
        assert restored == document

    @pytest.mark.asyncio
    async def test_from_path(self, tmp_path):
        path = tmp_path / "letter.txt"
        path.write_bytes(b"Dear reader")
        document = await DocumentFile.from_path(path)
        assert document.filename == "letter.txt"
        assert document.mime_type == "text/plain"
        assert document.data == b"Dear reader"

    @pytest.mark.asyncio
    async def test_from_missing_path(self, tmp_path):
        with pytest.raises(FileReadError):
            await DocumentFile.from_path(tmp_path / "missing.pdf")


class TestFilenames:
    """Tests for output naming."""

    @pytest.mark.parametrize("filename, target, expected", [
        ("report.docx", "es", "report_translated_to_es.docx"),
        ("archive.tar.gz", "fr", "archive.tar_translated_to_fr.gz"),
        ("notes", "de", "notes_translated_to_de"),
    ])
    def test_translated_filename(self, filename, target, expected):
        assert translated_filename(filename, target) == expected

    def test_unique_output_path(self, tmp_path):
        target = tmp_path / "out.pdf"
        assert get_unique_output_path(target) == str(target)
        target.write_bytes(b"x")
        assert get_unique_output_path(target) == str(tmp_path / "out (1).pdf")
