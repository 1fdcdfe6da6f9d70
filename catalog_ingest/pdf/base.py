from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Turns an uploaded menu PDF into text the extraction model can read."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Return the text of every page, in page order.

        Pages are joined with blank lines. An empty string means the PDF has
        no text layer, as with a scanned menu.

        Raises:
            PdfExtractionError: if the bytes are not a readable PDF.
        """
