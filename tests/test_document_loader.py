"""Unit tests for DocumentLoader."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import fitz  # PyMuPDF
import pytest
from services.document_loader import (
    DocumentLoader,
    DocumentLoadError,
    EmptyDocumentError,
    FileTooLargeError,
    TextExtractionError,
    UnsupportedFileTypeError,
)


def make_pdf(*page_texts: str) -> bytes:
    pdf_document = fitz.open()
    for text in page_texts:
        page = pdf_document.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = pdf_document.tobytes()
    pdf_document.close()
    return data


class TestDocumentLoader:
    """Test suite for DocumentLoader."""

    @pytest.fixture
    def loader(self):
        return DocumentLoader()

    def test_txt_upload(self, loader):
        assert loader.extract_text("notes.txt", "Meeting notes: ship v2".encode()) == "Meeting notes: ship v2"

    def test_txt_with_invalid_utf8_is_replaced(self, loader):
        text = loader.extract_text("notes.txt", b"caf\xe9 menu")
        assert text.startswith("caf")
        assert text.endswith(" menu")

    def test_pdf_upload(self, loader):
        text = loader.extract_text("report.pdf", make_pdf("Quarterly revenue grew", "Second page"))

        assert "Quarterly revenue grew" in text
        assert "Second page" in text
        assert text.index("Quarterly") < text.index("Second page")

    def test_extension_is_case_insensitive(self, loader):
        assert "Upper case" in loader.extract_text("REPORT.PDF", make_pdf("Upper case"))

    def test_unsupported_type(self, loader):
        with pytest.raises(UnsupportedFileTypeError, match="PDF or TXT"):
            loader.extract_text("slides.pptx", b"data")

    def test_file_too_large(self):
        loader = DocumentLoader(max_file_size=10)

        with pytest.raises(FileTooLargeError):
            loader.extract_text("notes.txt", b"x" * 11)

    def test_check_size(self):
        loader = DocumentLoader(max_file_size=10)

        loader.check_size(10)
        with pytest.raises(FileTooLargeError, match="too large"):
            loader.check_size(11)

    def test_default_size_limit_is_ten_megabytes(self, loader):
        assert loader.max_file_size == 10 * 1024 * 1024

    def test_corrupted_pdf(self, loader):
        with pytest.raises(TextExtractionError, match="corrupted"):
            loader.extract_text("broken.pdf", b"this is not a pdf")

    def test_blank_txt(self, loader):
        with pytest.raises(EmptyDocumentError):
            loader.extract_text("blank.txt", b"  \n\t ")

    def test_image_only_pdf(self, loader):
        with pytest.raises(EmptyDocumentError, match="image-based or empty"):
            loader.extract_text("scan.pdf", make_pdf(""))

    def test_errors_share_a_base_class(self):
        for error_type in (UnsupportedFileTypeError, FileTooLargeError, TextExtractionError, EmptyDocumentError):
            assert issubclass(error_type, DocumentLoadError)
