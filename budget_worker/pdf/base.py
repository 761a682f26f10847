from abc import ABC, abstractmethod
from collections.abc import Iterator


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters.

    Adapters yield text page by page in a single pass; extract() joins the
    pages into the text handed to the analysis stage.
    """

    @abstractmethod
    def iter_pages(self, pdf_bytes: bytes) -> Iterator[str]:
        """Yield the text of each page in document order.

        Raises:
            PdfExtractionError: if the bytes are not a readable PDF.
        """

    def extract(self, pdf_bytes: bytes) -> str:
        """Extract plain text from PDF bytes.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            Page texts joined by newlines, stripped. Empty string for a PDF
            without a text layer.

        Raises:
            PdfExtractionError: if extraction fails for any reason.
        """
        return "\n".join(page.strip() for page in self.iter_pages(pdf_bytes)).strip()
