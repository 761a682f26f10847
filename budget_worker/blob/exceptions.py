class BlobStoreError(Exception):
    """Base exception for all blob store errors."""


class BlobNotFoundError(BlobStoreError):
    """Raised when a blob reference cannot be resolved to stored content."""
