from catalog_ingest.documents.base import BaseDocumentReader, DocumentContent
from catalog_ingest.documents.exceptions import DocumentReadError
from catalog_ingest.pdf.base import BasePdfExtractor
from catalog_ingest.pdf.exceptions import PdfExtractionError


class PdfDocumentReader(BaseDocumentReader):
    """Reads text-based PDFs through the configured PDF engine."""

    def __init__(self, pdf_extractor: BasePdfExtractor) -> None:
        self._pdf_extractor = pdf_extractor

    def read(self, raw_bytes: bytes, media_type: str) -> DocumentContent:
        try:
            text = self._pdf_extractor.extract(raw_bytes)
        except PdfExtractionError as exc:
            raise DocumentReadError(str(exc)) from exc
        if not text:
            raise DocumentReadError("PDF contains no extractable text")
        return DocumentContent(media_type=media_type, text=text)
