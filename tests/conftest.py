"""Shared fixtures for tests — synthetic documents, no network calls."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from docchat.chunking.schemas import ChunkMetadata

# Page 1 of the sample PDF: 250 distinct 4-char words (1249 chars joined)
LONG_PAGE_WORDS = [f"w{i:03d}" for i in range(250)]

# ---------------------------------------------------------------------------
# Synthetic document content
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_txt_content() -> str:
    return textwrap.dedent("""\
        Quarterly Operations Review

        Shipping volume rose 12% over the prior quarter. The northern
        warehouse completed its migration to the new inventory system and
        reduced picking errors by a third.

        Staffing

        Two senior engineers joined the platform team. Contractor spend
        fell for the second consecutive quarter.

        Outlook

        The team expects volume growth to slow during the summer months
        while the southern warehouse is refitted.
    """)


@pytest.fixture
def sample_txt_file(tmp_path: Path, sample_txt_content: str) -> Path:
    p = tmp_path / "ops_review.txt"
    p.write_text(sample_txt_content, encoding="utf-8")
    return p


@pytest.fixture
def long_page_text() -> str:
    return " ".join(LONG_PAGE_WORDS)


@pytest.fixture
def sample_pdf_file(tmp_path: Path, long_page_text: str) -> Path:
    """Two-page PDF: a long first page and a short second page."""
    from fpdf import FPDF

    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.set_font("Helvetica", size=10)

    pdf.add_page()
    pdf.multi_cell(0, 5, text=long_page_text)

    pdf.add_page()
    pdf.multi_cell(0, 5, text="Appendix with a short closing note.")

    p = tmp_path / "report.pdf"
    pdf.output(str(p))
    return p


@pytest.fixture
def blank_pdf_file(tmp_path: Path) -> Path:
    """PDF whose only page carries no text."""
    from fpdf import FPDF

    pdf = FPDF()
    pdf.add_page()
    p = tmp_path / "scanned.pdf"
    pdf.output(str(p))
    return p


@pytest.fixture
def sample_docx_file(tmp_path: Path) -> Path:
    """Create a minimal DOCX file."""
    from docx import Document

    doc = Document()
    doc.add_heading("Project Charter", level=1)
    doc.add_paragraph(
        "The project replaces the legacy billing engine with a service "
        "that supports usage-based pricing."
    )
    doc.add_paragraph("Delivery is planned for the end of the third quarter.")

    p = tmp_path / "charter.docx"
    doc.save(str(p))
    return p


@pytest.fixture
def sample_chunk_metadata() -> ChunkMetadata:
    return ChunkMetadata(file_id="F", page=1, user_id="U1", folder_id="D1")
