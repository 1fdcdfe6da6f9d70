import io

import pdfplumber

from catalog_ingest.pdf.base import BasePdfExtractor
from catalog_ingest.pdf.exceptions import PdfExtractionError


class PdfPlumberAdapter(BasePdfExtractor):
    """Extracts menu text with pdfplumber, page by page."""

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [
                    self._page_text(page.extract_text() or "")
                    for page in pdf.pages
                ]
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber could not read document: {exc}") from exc
        return "\n\n".join(p for p in pages if p).strip()

    @staticmethod
    def _page_text(raw: str) -> str:
        lines = [line.rstrip() for line in raw.splitlines()]
        return "\n".join(line for line in lines if line.strip())
