from abc import ABC, abstractmethod
from typing import Any

from catalog_ingest.documents.base import DocumentContent


class BaseCatalogExtractor(ABC):
    """Contract for all catalog extraction adapters."""

    @abstractmethod
    def extract(self, content: DocumentContent) -> dict[str, Any]:
        """Ask the AI service for a draft catalog of the document.

        Args:
            content: Text or image produced by a document reader.

        Returns:
            The raw JSON object returned by the service, not yet validated.

        Raises:
            ExtractionError: on any failure.
        """
