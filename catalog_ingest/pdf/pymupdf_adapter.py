import pymupdf

from catalog_ingest.pdf.base import BasePdfExtractor
from catalog_ingest.pdf.exceptions import PdfExtractionError


class PyMuPdfAdapter(BasePdfExtractor):
    """Extracts menu text with PyMuPDF, block by block in reading order."""

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text("text", sort=True).strip() for page in doc]
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf could not read document: {exc}") from exc
        return "\n\n".join(p for p in pages if p).strip()
