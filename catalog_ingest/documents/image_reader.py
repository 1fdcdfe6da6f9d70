import base64

from catalog_ingest.documents import media_types
from catalog_ingest.documents.base import BaseDocumentReader, DocumentContent
from catalog_ingest.documents.exceptions import DocumentReadError

_SIGNATURES: dict[str, tuple[bytes, ...]] = {
    media_types.PNG: (b"\x89PNG\r\n\x1a\n",),
    media_types.JPEG: (b"\xff\xd8\xff",),
}


class ImageDocumentReader(BaseDocumentReader):
    """Passes photos of menus to the vision model as a data URL."""

    def read(self, raw_bytes: bytes, media_type: str) -> DocumentContent:
        signatures = _SIGNATURES.get(media_type, ())
        if not any(raw_bytes.startswith(sig) for sig in signatures):
            raise DocumentReadError(f"File content is not a valid {media_type} image")
        encoded = base64.b64encode(raw_bytes).decode("ascii")
        return DocumentContent(
            media_type=media_type,
            image_data_url=f"data:{media_type};base64,{encoded}",
        )
