"""PDF parsing module using pypdf.

Turns an uploaded PDF into the plain text a knowledge base document
holds: pages are extracted in order, whitespace is normalised and the
document title is taken from the metadata when present.
"""

import io
import logging
import re
from pathlib import PurePath

from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

# Constants
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
PDF_MAGIC_BYTES = b"%PDF"

_METADATA_FIELDS = {
    "/Title": "title",
    "/Author": "author",
    "/Subject": "subject",
    "/Keywords": "keywords",
    "/Creator": "creator",
    "/Producer": "producer",
}
_INLINE_SPACE_RE = re.compile(r"[ \t\f\v]+")
_BLANK_LINES_RE = re.compile(r"\n{3,}")


class PDFContent(BaseModel):
    """Extracted content from a PDF file.

    Attributes:
        text: Cleaned text of all pages, pages separated by a blank line.
        pages: Total number of pages in the document.
        metadata: Document metadata (title, author, etc.).
    """

    text: str
    pages: int = Field(ge=0)
    metadata: dict[str, str | None]

    def title_or(self, filename: str) -> str:
        """Metadata title, or the file name without extension."""
        title = (self.metadata.get("title") or "").strip()
        return title or PurePath(filename).stem


class PDFParseError(Exception):
    """Raised when PDF parsing fails."""

    pass


def clean_text(text: str) -> str:
    """Collapse runs of inline whitespace and excess blank lines."""
    text = text.replace("\x00", "").replace("\r\n", "\n").replace("\r", "\n")
    lines = [_INLINE_SPACE_RE.sub(" ", line).strip() for line in text.split("\n")]
    return _BLANK_LINES_RE.sub("\n\n", "\n".join(lines)).strip()


def _validate_pdf_bytes(file_content: bytes) -> None:
    """Validate PDF file content before parsing.

    Raises:
        PDFParseError: If validation fails.
    """
    if not file_content:
        raise PDFParseError("Empty file provided")

    if len(file_content) > MAX_FILE_SIZE:
        size_mb = len(file_content) / (1024 * 1024)
        raise PDFParseError(f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)")

    if not file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise PDFParseError("Invalid PDF: file does not start with PDF header")


def _extract_metadata(reader: PdfReader) -> dict[str, str | None]:
    metadata: dict[str, str | None] = {}

    try:
        info = reader.metadata
        if info:
            for pdf_key, name in _METADATA_FIELDS.items():
                value = info.get(pdf_key)
                if value:
                    metadata[name] = str(value).strip()

            creation_date = info.get("/CreationDate")
            if creation_date:
                metadata["creation_date"] = str(creation_date)
    except Exception as e:
        logger.warning(f"Failed to extract some metadata: {e}")

    return {k: v for k, v in metadata.items() if v}


def parse_pdf(file_content: bytes) -> PDFContent:
    """Parse a PDF file and extract its text content.

    Args:
        file_content: Raw bytes of the PDF file.

    Returns:
        PDFContent with cleaned text, page count, and metadata.

    Raises:
        PDFParseError: If the file is invalid, too large, empty, or corrupt.
    """
    _validate_pdf_bytes(file_content)

    try:
        reader = PdfReader(io.BytesIO(file_content))
        pages = len(reader.pages)
    except PdfReadError as e:
        raise PDFParseError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise PDFParseError(f"Failed to read PDF: {e}") from e

    if pages == 0:
        raise PDFParseError("PDF contains no pages")

    page_texts: list[str] = []
    for i, page in enumerate(reader.pages):
        try:
            page_text = clean_text(page.extract_text() or "")
        except Exception as e:
            logger.warning(f"Failed to extract text from page {i + 1}: {e}")
            continue
        if page_text:
            page_texts.append(page_text)

    text = "\n\n".join(page_texts)
    if not text:
        logger.warning("PDF contains no extractable text (may be scanned/image-based)")

    return PDFContent(
        text=text,
        pages=pages,
        metadata=_extract_metadata(reader),
    )
