class PdfExtractionError(Exception):
    """Raised when text cannot be extracted from PDF bytes."""
