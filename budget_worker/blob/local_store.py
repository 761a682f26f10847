import re
import uuid
from pathlib import Path

from budget_worker.blob.base import BaseBlobStore, UploadDestination
from budget_worker.blob.exceptions import BlobNotFoundError

_BLOB_REF_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def blob_file_path(files_root: Path, blob_ref: str) -> Path:
    """Build path to blob file: {files_root}/{blob_ref}.pdf"""
    return files_root / f"{blob_ref}.pdf"


class LocalBlobStore(BaseBlobStore):
    """Stores blobs as files under a root directory."""

    FILES_ROOT = Path("/app/files")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    def create_upload_destination(self) -> UploadDestination:
        blob_ref = uuid.uuid4().hex
        return UploadDestination(
            blob_ref=blob_ref,
            location=str(blob_file_path(self._files_root, blob_ref)),
        )

    def write(self, blob_ref: str, payload: bytes) -> None:
        path = self._resolve_path(blob_ref)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)

    def exists(self, blob_ref: str) -> bool:
        if not _BLOB_REF_PATTERN.match(blob_ref):
            return False
        return blob_file_path(self._files_root, blob_ref).is_file()

    def read(self, blob_ref: str) -> bytes:
        path = self._resolve_path(blob_ref)
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise BlobNotFoundError(f"Blob not found: {blob_ref}") from exc

    def delete(self, blob_ref: str) -> None:
        self._resolve_path(blob_ref).unlink(missing_ok=True)

    def _resolve_path(self, blob_ref: str) -> Path:
        # Refs are opaque to callers but must never escape files_root.
        if not _BLOB_REF_PATTERN.match(blob_ref):
            raise BlobNotFoundError(f"Invalid blob reference: {blob_ref!r}")
        return blob_file_path(self._files_root, blob_ref)
