from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class UploadDestination:
    """Where a client should transfer an uploaded payload."""

    blob_ref: str
    location: str


class BaseBlobStore(ABC):
    """Contract for binary content storage adapters."""

    @abstractmethod
    def create_upload_destination(self) -> UploadDestination:
        """Reserve a new blob reference for an upcoming upload."""

    @abstractmethod
    def write(self, blob_ref: str, payload: bytes) -> None:
        """Store payload under a reference issued by create_upload_destination.

        Raises:
            BlobNotFoundError: if the reference was not issued by this store.
        """

    @abstractmethod
    def exists(self, blob_ref: str) -> bool:
        """Return True if content is stored under blob_ref."""

    @abstractmethod
    def read(self, blob_ref: str) -> bytes:
        """Return the stored content.

        Raises:
            BlobNotFoundError: if nothing is stored under blob_ref.
        """

    @abstractmethod
    def delete(self, blob_ref: str) -> None:
        """Delete the stored content. Deleting a missing blob is a no-op."""
