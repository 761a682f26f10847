import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


def render_statement_pdf(pages: list[list[str]]) -> bytes:
    """Render one PDF page per entry, one text line per string."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for lines in pages:
        y = 720
        for line in lines:
            c.drawString(72, y, line)
            y -= 18
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """A single-page card statement with three transaction lines."""
    return render_statement_pdf(
        [
            [
                "ACME BANK CARD STATEMENT",
                "2025-01-05 GROCERY MART 42.10",
                "2025-01-07 CITY METRO 2.75",
                "2025-01-12 CORNER CAFE 6.40",
            ]
        ]
    )


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """A statement split over two pages."""
    return render_statement_pdf(
        [
            ["Statement page 1", "2025-02-01 BOOK NOOK 18.00"],
            ["Statement page 2", "2025-02-20 POWER CO 64.30"],
        ]
    )


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """A valid PDF with a blank page and no text layer."""
    return render_statement_pdf([[]])
