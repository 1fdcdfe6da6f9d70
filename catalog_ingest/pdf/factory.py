from catalog_ingest.pdf.base import BasePdfExtractor
from catalog_ingest.pdf.pdfplumber_adapter import PdfPlumberAdapter
from catalog_ingest.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Creates the PDF extractor for the configured engine."""

    ADAPTERS: dict[str, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, engine: str) -> BasePdfExtractor:
        key = engine.lower()
        adapter_cls = cls.ADAPTERS.get(key)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{key}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
