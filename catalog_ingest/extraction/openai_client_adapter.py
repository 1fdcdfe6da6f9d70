from typing import Any

import httpx
import openai

from catalog_ingest.extraction.client_base import BaseExtractionClient
from catalog_ingest.extraction.exceptions import (
    ExtractionError,
    ExtractionNetworkError,
    ExtractionTimeoutError,
)


class OpenAIClientAdapter(BaseExtractionClient):
    """Extraction AI client adapter built on OpenAI-compatible chat API.

    The SDK's own retries are disabled: a failed call fails the session and
    the user re-submits.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
        max_tokens: int = 4000,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )
        self._timeout_seconds = timeout_seconds
        self._max_tokens = max_tokens

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> str:
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=self._max_tokens,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": "catalog_draft",
                        "strict": True,
                        "schema": json_schema,
                    },
                },
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": self._user_content(user_prompt, image_data_url)},
                ],
            )
        except (openai.APITimeoutError, httpx.TimeoutException) as exc:
            raise ExtractionTimeoutError(
                f"AI provider did not answer within {self._timeout_seconds}s"
            ) from exc
        except (openai.APIConnectionError, httpx.ConnectError) as exc:
            raise ExtractionNetworkError(
                f"AI provider network error: {exc}"
            ) from exc
        except openai.APIError as exc:
            raise ExtractionNetworkError(
                f"AI provider API error: {exc}"
            ) from exc

        if not response.choices:
            raise ExtractionError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise ExtractionError("AI returned empty response")
        return content

    @staticmethod
    def _user_content(user_prompt: str, image_data_url: str | None) -> Any:
        if image_data_url is None:
            return user_prompt
        return [
            {"type": "text", "text": user_prompt},
            {"type": "image_url", "image_url": {"url": image_data_url, "detail": "high"}},
        ]
