from collections.abc import Iterator

import pymupdf

from budget_worker.pdf.base import BasePdfExtractor
from budget_worker.pdf.exceptions import PdfExtractionError


class PyMuPdfAdapter(BasePdfExtractor):
    """Extracts statement text with PyMuPDF, sorting blocks in reading order."""

    def iter_pages(self, pdf_bytes: bytes) -> Iterator[str]:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                for page in doc:
                    yield page.get_text(sort=True)
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf could not read statement: {exc}") from exc
