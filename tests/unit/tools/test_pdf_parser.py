"""Tests for document text extraction."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from cvmatch_agents.tools.pdf_parser import PDFParser, load_document_text
from cvmatch_core.exceptions import EncryptedPDFError, InvalidFileError, ScannedPDFError

LONG_TEXT = "Développeuse Python confirmée, expérience en API REST et cloud AWS. " * 2


@pytest.mark.unit
class TestPDFParser:
    """Test the pdfplumber -> pypdf fallback chain."""

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path: Path) -> None:
        """A missing path raises InvalidFileError."""
        with pytest.raises(InvalidFileError, match="not found"):
            await PDFParser().extract_text(tmp_path / "absent.pdf")

    @pytest.mark.asyncio
    async def test_wrong_suffix(self, tmp_path: Path) -> None:
        """Non-PDF files are rejected."""
        path = tmp_path / "cv.docx"
        path.write_bytes(b"x")
        with pytest.raises(InvalidFileError, match="Expected PDF"):
            await PDFParser().extract_text(path)

    @pytest.mark.asyncio
    async def test_pdfplumber_first(self, tmp_path: Path) -> None:
        """pdfplumber text is used when long enough."""
        path = tmp_path / "cv.pdf"
        path.write_bytes(b"%PDF-1.4")
        parser = PDFParser()
        with (
            patch.object(parser, "_try_pdfplumber", new_callable=AsyncMock, return_value=LONG_TEXT),
            patch.object(parser, "_try_pypdf", new_callable=AsyncMock) as pypdf,
        ):
            assert await parser.extract_text(path) == LONG_TEXT
        pypdf.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_falls_back_to_pypdf(self, tmp_path: Path) -> None:
        """Short pdfplumber output falls through to pypdf."""
        path = tmp_path / "cv.pdf"
        path.write_bytes(b"%PDF-1.4")
        parser = PDFParser()
        with (
            patch.object(parser, "_try_pdfplumber", new_callable=AsyncMock, return_value="court"),
            patch.object(parser, "_try_pypdf", new_callable=AsyncMock, return_value=LONG_TEXT),
        ):
            assert await parser.extract_text(path) == LONG_TEXT

    @pytest.mark.asyncio
    async def test_scanned_pdf(self, tmp_path: Path) -> None:
        """No extractable text raises ScannedPDFError."""
        path = tmp_path / "scan.pdf"
        path.write_bytes(b"%PDF-1.4")
        parser = PDFParser()
        with (
            patch.object(parser, "_try_pdfplumber", new_callable=AsyncMock, return_value=None),
            patch.object(parser, "_try_pypdf", new_callable=AsyncMock, return_value=""),
            pytest.raises(ScannedPDFError),
        ):
            await parser.extract_text(path)

    @pytest.mark.asyncio
    async def test_encrypted_pdf_propagates(self, tmp_path: Path) -> None:
        """Password-protected PDFs stop the chain."""
        path = tmp_path / "locked.pdf"
        path.write_bytes(b"%PDF-1.4")
        parser = PDFParser()
        with (
            patch.object(
                parser,
                "_try_pdfplumber",
                new_callable=AsyncMock,
                side_effect=EncryptedPDFError("locked"),
            ),
            pytest.raises(EncryptedPDFError),
        ):
            await parser.extract_text(path)


@pytest.mark.unit
class TestLoadDocumentText:
    """Test load_document_text dispatch."""

    @pytest.mark.asyncio
    async def test_reads_text_files(self, tmp_path: Path) -> None:
        """Plain text files are read as UTF-8."""
        path = tmp_path / "offre.txt"
        path.write_text("Développeur Python (H/F)", encoding="utf-8")

        assert await load_document_text(path) == "Développeur Python (H/F)"

    @pytest.mark.asyncio
    async def test_unsupported_suffix(self, tmp_path: Path) -> None:
        """Unknown extensions are rejected."""
        with pytest.raises(InvalidFileError, match="Unsupported"):
            await load_document_text(tmp_path / "cv.odt")

    @pytest.mark.asyncio
    async def test_missing_text_file(self, tmp_path: Path) -> None:
        """A missing text file raises InvalidFileError."""
        with pytest.raises(InvalidFileError, match="not found"):
            await load_document_text(tmp_path / "absent.md")

    @pytest.mark.asyncio
    async def test_pdf_goes_through_parser(self, tmp_path: Path) -> None:
        """PDF paths are delegated to PDFParser."""
        path = tmp_path / "cv.pdf"
        with patch.object(
            PDFParser, "extract_text", new_callable=AsyncMock, return_value=LONG_TEXT
        ) as extract:
            assert await load_document_text(path) == LONG_TEXT
        extract.assert_awaited_once_with(path)
