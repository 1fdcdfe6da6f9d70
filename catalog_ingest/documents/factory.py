from catalog_ingest.documents import media_types
from catalog_ingest.documents.base import BaseDocumentReader
from catalog_ingest.documents.exceptions import DocumentReadError
from catalog_ingest.documents.image_reader import ImageDocumentReader
from catalog_ingest.documents.pdf_reader import PdfDocumentReader
from catalog_ingest.documents.tabular_reader import CsvDocumentReader, XlsxDocumentReader
from catalog_ingest.pdf.factory import PdfExtractorFactory


class DocumentReaderFactory:
    """Maps each accepted media type to its reader."""

    def __init__(self, readers: dict[str, BaseDocumentReader]) -> None:
        self._readers = readers

    @classmethod
    def create(cls, pdf_engine: str) -> "DocumentReaderFactory":
        image_reader = ImageDocumentReader()
        return cls(
            {
                media_types.PDF: PdfDocumentReader(PdfExtractorFactory.create(pdf_engine)),
                media_types.JPEG: image_reader,
                media_types.PNG: image_reader,
                media_types.CSV: CsvDocumentReader(),
                media_types.XLSX: XlsxDocumentReader(),
            }
        )

    def reader_for(self, media_type: str) -> BaseDocumentReader:
        reader = self._readers.get(media_types.canonical_media_type(media_type))
        if reader is None:
            raise DocumentReadError(f"No reader for media type '{media_type}'")
        return reader
