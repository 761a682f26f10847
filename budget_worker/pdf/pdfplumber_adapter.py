import io
from collections.abc import Iterator

import pdfplumber

from budget_worker.pdf.base import BasePdfExtractor
from budget_worker.pdf.exceptions import PdfExtractionError


class PdfPlumberAdapter(BasePdfExtractor):
    """Extracts statement text with pdfplumber, keeping column order within lines."""

    def iter_pages(self, pdf_bytes: bytes) -> Iterator[str]:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                for page in pdf.pages:
                    yield page.extract_text() or ""
                    page.close()
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber could not read statement: {exc}") from exc
