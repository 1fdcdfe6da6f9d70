"""AI-powered catalog extractor."""

import json
import re
from pathlib import Path
from typing import Any

from catalog_ingest.documents.base import DocumentContent
from catalog_ingest.extraction.base import BaseCatalogExtractor
from catalog_ingest.extraction.client_base import BaseExtractionClient
from catalog_ingest.extraction.exceptions import DraftValidationError
from catalog_ingest.extraction.prompt_loader import load_json_schema, load_prompt_template
from catalog_ingest.logging.logger import Log

DEFAULT_SYSTEM_PROMPT = (
    "You extract structured product catalogs from restaurant and shop menus. "
    "Answer with JSON only."
)

_MAX_TEXT_CHARS = 60_000
_IMAGE_PLACEHOLDER = "(The menu is provided as the attached image.)"
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class CatalogExtractor(BaseCatalogExtractor):
    """Extracts a draft catalog from document content using an AI provider."""

    def __init__(
        self,
        *,
        client: BaseExtractionClient,
        model: str,
        temperature: float = 0.0,
        sales_channel: str = "dine-in",
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._sales_channel = sales_channel
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template(prompt_template_path)
        schema_str = load_json_schema(json_schema_path)
        self._json_schema = schema_str
        self._json_schema_dict = json.loads(schema_str)

    def extract(self, content: DocumentContent) -> dict[str, Any]:
        """Send the document to the AI provider and return its parsed JSON answer."""
        prompt = self._build_prompt(content)
        Log.debug(f"Extraction prompt:\n{prompt}")

        raw_response = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            json_schema=self._json_schema_dict,
            image_data_url=content.image_data_url,
        )
        Log.debug(f"AI raw response:\n{raw_response}")

        return self._parse_json(raw_response)

    def _build_prompt(self, content: DocumentContent) -> str:
        text = content.text
        if not text and content.image_data_url is not None:
            text = _IMAGE_PLACEHOLDER
        if len(text) > _MAX_TEXT_CHARS:
            Log.warning(
                f"Document text truncated from {len(text)} to {_MAX_TEXT_CHARS} chars"
            )
            text = text[:_MAX_TEXT_CHARS]
        return self._prompt_template.format(
            document_text=text,
            json_schema=self._json_schema,
            sales_channel=self._sales_channel,
        )

    @staticmethod
    def _parse_json(raw: str) -> dict[str, Any]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError:
            # Some models wrap the object in prose.
            match = _JSON_OBJECT.search(cleaned)
            if match is None:
                raise DraftValidationError("AI response contains no JSON object") from None
            try:
                parsed = json.loads(match.group(0))
            except json.JSONDecodeError as exc:
                raise DraftValidationError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise DraftValidationError("JSON response must be an object")
        return parsed
