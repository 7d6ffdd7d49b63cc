"""PDF parsing for document ingestion.

Responsibilities:
    - PDF validation (size limit, header check)
    - Text extraction with pypdf
    - Metadata extraction (title, author, dates)
"""

from kbase.parsing.pdf_parser import MAX_FILE_SIZE, PDFContent, PDFParseError, parse_pdf

__all__ = ["MAX_FILE_SIZE", "PDFContent", "PDFParseError", "parse_pdf"]
