"""CV document text extraction: PDF (pdfplumber -> pypdf) or plain text."""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog

from cvmatch_core.exceptions import EncryptedPDFError, InvalidFileError, ScannedPDFError

logger = structlog.get_logger()

MAX_PDF_SIZE_MB = 10
MIN_TEXT_CHARS = 50
TEXT_SUFFIXES = frozenset({".txt", ".md", ".text"})


class PDFParser:
    """Extract text from PDF files with a pdfplumber -> pypdf fallback chain."""

    async def extract_text(self, path: Path) -> str:
        """Extract text from a PDF file.

        Raises:
            InvalidFileError: If the file is missing or not a PDF.
            EncryptedPDFError: If the PDF is password-protected.
            ScannedPDFError: If the PDF has no text layer.
        """
        self._validate_file(path)
        self._check_size(path)

        for extractor in (self._try_pdfplumber, self._try_pypdf):
            text = await extractor(path)
            if text and len(text.strip()) > MIN_TEXT_CHARS:
                return text

        msg = f"PDF appears to be scanned/image-only with no extractable text: {path}"
        raise ScannedPDFError(msg)

    def _validate_file(self, path: Path) -> None:
        """Validate that the file exists and is a PDF."""
        if not path.exists():
            msg = f"File not found: {path}"
            raise InvalidFileError(msg)
        if path.suffix.lower() != ".pdf":
            msg = f"Expected PDF file, got: {path.suffix}"
            raise InvalidFileError(msg)

    def _check_size(self, path: Path) -> None:
        """Warn if PDF is larger than MAX_PDF_SIZE_MB."""
        size_mb = path.stat().st_size / (1024 * 1024)
        if size_mb > MAX_PDF_SIZE_MB:
            logger.warning("large_pdf", path=str(path), size_mb=round(size_mb, 1))

    async def _try_pdfplumber(self, path: Path) -> str | None:
        """Try extracting text with pdfplumber."""
        import pdfplumber

        def _extract() -> str:
            with pdfplumber.open(str(path)) as pdf:
                return "\n\n".join(
                    text for page in pdf.pages if (text := page.extract_text())
                )

        try:
            return await asyncio.to_thread(_extract)
        except Exception as e:
            if "password" in str(e).lower() or "encrypted" in str(e).lower():
                msg = f"PDF is password-protected: {path}"
                raise EncryptedPDFError(msg) from e
            logger.debug("pdfplumber_fallback", error=str(e))
            return None

    async def _try_pypdf(self, path: Path) -> str | None:
        """Try extracting text with pypdf."""
        from pypdf import PdfReader

        def _extract() -> str:
            reader = PdfReader(str(path))
            if reader.is_encrypted:
                msg = f"PDF is password-protected: {path}"
                raise EncryptedPDFError(msg)
            return "\n\n".join(
                text for page in reader.pages if (text := page.extract_text())
            )

        try:
            return await asyncio.to_thread(_extract)
        except EncryptedPDFError:
            raise
        except Exception as e:
            logger.debug("pypdf_fallback", error=str(e))
            return None


async def load_document_text(path: Path) -> str:
    """Read a CV or job document: PDFs go through PDFParser, text files are read as-is."""
    suffix = path.suffix.lower()
    if suffix == ".pdf":
        return await PDFParser().extract_text(path)
    if suffix not in TEXT_SUFFIXES:
        msg = f"Unsupported document type: {suffix or path.name}"
        raise InvalidFileError(msg)
    if not path.exists():
        msg = f"File not found: {path}"
        raise InvalidFileError(msg)
    return await asyncio.to_thread(path.read_text, encoding="utf-8")
