from pathlib import Path

from catalog_ingest.documents import media_types
from catalog_ingest.documents.exceptions import SourceMissingError


def document_file_path(files_root: Path, store_id: str, session_id: str, media_type: str) -> Path:
    """Build path to an upload: {files_root}/{store_id}/{session_id}{ext}"""
    extension = media_types.FILE_EXTENSIONS.get(media_type, "")
    return files_root / store_id / f"{session_id}{extension}"


class FileStore:
    """Keeps uploaded bytes on local disk, keyed by store and session."""

    def __init__(self, files_root: Path) -> None:
        self._files_root = files_root

    def save(self, store_id: str, session_id: str, media_type: str, data: bytes) -> Path:
        path = document_file_path(self._files_root, store_id, session_id, media_type)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    def load(self, source_path: str) -> bytes:
        """Read stored bytes back.

        Raises:
            SourceMissingError: if the file no longer exists.
        """
        path = Path(source_path)
        if not path.is_file():
            raise SourceMissingError(f"Uploaded file not found: {path}")
        return path.read_bytes()

    def delete(self, source_path: str) -> None:
        Path(source_path).unlink(missing_ok=True)
