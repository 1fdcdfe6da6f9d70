"""Example extraction client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseExtractionClient and register the provider in ExtractorFactory.
"""

import json
from typing import ClassVar

from catalog_ingest.extraction.client_base import BaseExtractionClient


class ExampleClientAdapter(BaseExtractionClient):
    """Example adapter that returns a fixed one-product draft.

    No network calls. Useful for local development and tests.
    """

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "products": [
            {
                "name": "Margherita",
                "description": "Tomato, mozzarella, basil",
                "category": "Pizzas",
                "price": None,
                "variations": [
                    {
                        "name": "Medium",
                        "prices": [
                            {"channel": "dine-in", "price": 11.5},
                            {"channel": "delivery", "price": 12.5},
                        ],
                    }
                ],
                "steps": [
                    {
                        "title": "Extra toppings",
                        "is_required": False,
                        "selection_type": "MULTIPLE",
                        "options": [
                            {
                                "name": "Mozzarella",
                                "prices": [{"channel": "dine-in", "price": 1.5}],
                                "component": {
                                    "name": "Mozzarella",
                                    "aliases": ["mozza"],
                                    "category": "Cheeses",
                                    "default_price": 1.5,
                                },
                            }
                        ],
                    }
                ],
            }
        ],
        "overall_confidence": 0.9,
        "needs_review": False,
    }

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
        _ = model, temperature, system_prompt, user_prompt, json_schema, image_data_url
        return json.dumps(self.DEFAULT_RESPONSE)
