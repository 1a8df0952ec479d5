"""Document loading service for uploaded PDF and TXT files."""
import logging
import os
import fitz  # PyMuPDF

from config import MAX_FILE_SIZE

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".txt")


class DocumentLoadError(ValueError):
    """Base class for upload problems that are the client's fault."""


class UnsupportedFileTypeError(DocumentLoadError):
    pass


class FileTooLargeError(DocumentLoadError):
    pass


class TextExtractionError(DocumentLoadError):
    pass


class EmptyDocumentError(DocumentLoadError):
    pass


class DocumentLoader:
    """Extracts text from uploaded files."""

    def __init__(self, max_file_size: int = MAX_FILE_SIZE):
        """
        Initialize DocumentLoader.

        Args:
            max_file_size: Largest accepted upload in bytes
        """
        self.max_file_size = max_file_size

    def extract_text(self, filename: str, data: bytes) -> str:
        """
        Extract the text of an uploaded file.

        Args:
            filename: Original filename; its extension selects the parser
            data: Raw file bytes

        Returns:
            Extracted text (never blank)

        Raises:
            FileTooLargeError: If data exceeds max_file_size
            UnsupportedFileTypeError: If the file is not PDF or TXT
            TextExtractionError: If the file cannot be parsed
            EmptyDocumentError: If the file has no text
        """
        self.check_size(len(data))

        extension = os.path.splitext(filename.lower())[1]
        if extension not in SUPPORTED_EXTENSIONS:
            raise UnsupportedFileTypeError(
                "Unsupported file type. Please upload a PDF or TXT file."
            )

        try:
            if extension == ".pdf":
                text = self._load_pdf(data)
            else:
                text = self._load_txt(data)
        except Exception as e:
            logger.warning(f"Failed to extract text from {filename}: {e}")
            raise TextExtractionError(
                "Failed to extract text from the file. "
                "The file may be corrupted or password-protected."
            ) from e

        if not text or not text.strip():
            raise EmptyDocumentError(
                "No text content found in the file. The file may be image-based or empty."
            )

        logger.info(f"Extracted {len(text)} characters from {filename}")
        return text

    def check_size(self, size: int) -> None:
        """Reject an upload of size bytes if it exceeds max_file_size."""
        if size > self.max_file_size:
            limit_mb = self.max_file_size // (1024 * 1024)
            raise FileTooLargeError(f"File too large. Maximum size is {limit_mb}MB.")

    def _load_pdf(self, data: bytes) -> str:
        """Extract text page by page from PDF bytes."""
        with fitz.open(stream=data, filetype="pdf") as pdf_document:
            if pdf_document.needs_pass:
                raise ValueError("PDF is password-protected")
            pages = [page.get_text() for page in pdf_document]
        return "\n".join(pages)

    def _load_txt(self, data: bytes) -> str:
        return data.decode("utf-8", errors="replace")
