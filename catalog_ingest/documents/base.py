from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class DocumentContent:
    """What the extraction model gets to see of an uploaded document.

    Text-bearing formats fill `text`; images are passed through as a
    base64 data URL for a vision-capable model.
    """

    media_type: str
    text: str = ""
    image_data_url: str | None = None


class BaseDocumentReader(ABC):
    """Contract for per-format document readers."""

    @abstractmethod
    def read(self, raw_bytes: bytes, media_type: str) -> DocumentContent:
        """Turn raw upload bytes into model input.

        Raises:
            DocumentReadError: if the bytes cannot be interpreted.
        """
