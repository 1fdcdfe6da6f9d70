"""Validates the AI's raw JSON answer and builds a Draft from it."""

from typing import Any

from catalog_ingest.extraction.exceptions import DraftValidationError
from catalog_ingest.extraction.models import (
    Draft,
    ExtractedComponent,
    ExtractedOption,
    ExtractedProduct,
    ExtractedStep,
    ExtractedVariation,
)

_MAX_PRODUCTS = 500
_DEFAULT_PRODUCT_CATEGORY = "General"
_SINGLE_VARIATION_NAME = "Standard"
_SELECTION_TYPES = frozenset({"SINGLE", "MULTIPLE"})


def validate_and_build(data: dict[str, Any], default_channel: str) -> Draft:
    """Validate raw parsed JSON and build a Draft.

    Args:
        data: JSON object returned by the extraction service.
        default_channel: Sales channel used when the service gives a bare price.

    Raises:
        DraftValidationError: on any validation failure.
    """
    products = _build_products(data.get("products"), default_channel)
    return Draft(
        products=products,
        overall_confidence=_build_confidence(data.get("overall_confidence")),
        needs_review=_optional_bool(data.get("needs_review"), "needs_review"),
    )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require_str(value: Any, where: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise DraftValidationError(f"{where} must be a non-empty string")
    return value.strip()


def _optional_bool(value: Any, where: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise DraftValidationError(f"'{where}' must be a boolean")
    return value


def _build_confidence(raw: Any) -> float | None:
    if raw is None:
        return None
    if not _is_number(raw) or not 0.0 <= raw <= 1.0:
        raise DraftValidationError("'overall_confidence' must be a number between 0 and 1")
    return float(raw)


def _build_products(raw: Any, default_channel: str) -> list[ExtractedProduct]:
    if not isinstance(raw, list):
        raise DraftValidationError("'products' must be a list")
    if not raw:
        raise DraftValidationError("No products found in document")
    if len(raw) > _MAX_PRODUCTS:
        raise DraftValidationError(f"Too many products: {len(raw)} (max {_MAX_PRODUCTS})")
    return [_build_product(item, i, default_channel) for i, item in enumerate(raw)]


def _build_product(raw: Any, index: int, default_channel: str) -> ExtractedProduct:
    where = f"Product at index {index}"
    if not isinstance(raw, dict):
        raise DraftValidationError(f"{where} must be an object")
    name = _require_str(raw.get("name"), f"{where}: 'name'")

    description = raw.get("description") or ""
    if not isinstance(description, str):
        raise DraftValidationError(f"{where}: 'description' must be a string")

    category = raw.get("category")
    if category is not None and not isinstance(category, str):
        raise DraftValidationError(f"{where}: 'category' must be a string")
    category = (category or "").strip() or _DEFAULT_PRODUCT_CATEGORY

    variations = _build_variations(raw.get("variations"), raw.get("price"), where, default_channel)
    steps = _build_steps(raw.get("steps"), where)
    return ExtractedProduct(
        name=name,
        description=description.strip(),
        category=category,
        variations=variations,
        steps=steps,
    )


def _build_prices(raw: Any, where: str) -> dict[str, float]:
    """Accepts a list of {channel, price} pairs or a channel -> price mapping."""
    if raw is None:
        return {}
    pairs: list[tuple[Any, Any]]
    if isinstance(raw, dict):
        pairs = list(raw.items())
    elif isinstance(raw, list):
        pairs = []
        for entry in raw:
            if not isinstance(entry, dict):
                raise DraftValidationError(f"{where}: each price must be an object")
            pairs.append((entry.get("channel"), entry.get("price")))
    else:
        raise DraftValidationError(f"{where}: 'prices' must be a list or an object")

    prices: dict[str, float] = {}
    for channel, price in pairs:
        channel_name = _require_str(channel, f"{where}: price channel")
        if not _is_number(price) or price < 0:
            raise DraftValidationError(
                f"{where}: price for '{channel_name}' must be a non-negative number"
            )
        prices[channel_name] = float(price)
    return prices


def _build_variations(
    raw: Any,
    bare_price: Any,
    where: str,
    default_channel: str,
) -> list[ExtractedVariation]:
    if raw is not None and not isinstance(raw, list):
        raise DraftValidationError(f"{where}: 'variations' must be a list")
    variations: list[ExtractedVariation] = []
    for i, item in enumerate(raw or []):
        if not isinstance(item, dict):
            raise DraftValidationError(f"{where}: variation {i} must be an object")
        name = item.get("name")
        if not isinstance(name, str) or not name.strip():
            name = f"Variation {i + 1}"
        prices = _build_prices(item.get("prices"), f"{where}, variation {i}")
        if not prices:
            raise DraftValidationError(f"{where}: variation {i} has no price")
        variations.append(ExtractedVariation(name=name.strip(), prices=prices))

    if variations:
        return variations
    if _is_number(bare_price) and bare_price >= 0:
        return [
            ExtractedVariation(
                name=_SINGLE_VARIATION_NAME, prices={default_channel: float(bare_price)}
            )
        ]
    raise DraftValidationError(f"{where} has no price")


def _build_steps(raw: Any, where: str) -> list[ExtractedStep]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise DraftValidationError(f"{where}: 'steps' must be a list")
    steps: list[ExtractedStep] = []
    for i, item in enumerate(raw):
        step_where = f"{where}, step {i}"
        if not isinstance(item, dict):
            raise DraftValidationError(f"{step_where} must be an object")
        title = _require_str(item.get("title"), f"{step_where}: 'title'")
        selection_type = item.get("selection_type") or "SINGLE"
        if selection_type not in _SELECTION_TYPES:
            raise DraftValidationError(
                f"{step_where}: 'selection_type' must be one of {sorted(_SELECTION_TYPES)}"
            )
        options_raw = item.get("options") or []
        if not isinstance(options_raw, list):
            raise DraftValidationError(f"{step_where}: 'options' must be a list")
        steps.append(
            ExtractedStep(
                title=title,
                is_required=_optional_bool(item.get("is_required"), "is_required"),
                selection_type=selection_type,
                options=[
                    _build_option(option, f"{step_where}, option {j}")
                    for j, option in enumerate(options_raw)
                ],
            )
        )
    return steps


def _build_option(raw: Any, where: str) -> ExtractedOption:
    if not isinstance(raw, dict):
        raise DraftValidationError(f"{where} must be an object")
    return ExtractedOption(
        name=_require_str(raw.get("name"), f"{where}: 'name'"),
        prices=_build_prices(raw.get("prices"), where),
        component=_build_component(raw.get("component"), where),
    )


def _build_component(raw: Any, where: str) -> ExtractedComponent | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise DraftValidationError(f"{where}: 'component' must be an object or null")
    name = _require_str(raw.get("name"), f"{where}: 'component.name'")

    aliases_raw = raw.get("aliases") or []
    if not isinstance(aliases_raw, list) or not all(isinstance(a, str) for a in aliases_raw):
        raise DraftValidationError(f"{where}: 'component.aliases' must be a list of strings")

    category = raw.get("category")
    if category is not None and not isinstance(category, str):
        raise DraftValidationError(f"{where}: 'component.category' must be a string or null")

    default_price = raw.get("default_price")
    if default_price is not None and (not _is_number(default_price) or default_price < 0):
        raise DraftValidationError(
            f"{where}: 'component.default_price' must be a non-negative number or null"
        )

    return ExtractedComponent(
        name=name,
        aliases=frozenset(a.strip() for a in aliases_raw if a.strip()),
        category=(category or "").strip() or None,
        default_price=float(default_price) if default_price is not None else None,
    )
