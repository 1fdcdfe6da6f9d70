from dataclasses import dataclass, field


@dataclass(frozen=True)
class ExtractedComponent:
    """A component reference found in the document, not yet matched to inventory."""

    name: str
    aliases: frozenset[str] = frozenset()
    category: str | None = None
    default_price: float | None = None


@dataclass(frozen=True)
class ExtractedOption:
    """One selectable choice inside a composition step."""

    name: str
    prices: dict[str, float] = field(default_factory=dict)
    component: ExtractedComponent | None = None


@dataclass(frozen=True)
class ExtractedStep:
    """A composition step such as 'Choose your sauce'."""

    title: str
    is_required: bool = False
    selection_type: str = "SINGLE"
    options: list[ExtractedOption] = field(default_factory=list)


@dataclass(frozen=True)
class ExtractedVariation:
    """A pricing variation: sales channel -> price."""

    name: str
    prices: dict[str, float]


@dataclass(frozen=True)
class ExtractedProduct:
    name: str
    category: str
    variations: list[ExtractedVariation]
    description: str = ""
    steps: list[ExtractedStep] = field(default_factory=list)


@dataclass(frozen=True)
class Draft:
    """Output of AI extraction, prior to materialization."""

    products: list[ExtractedProduct] = field(default_factory=list)
    overall_confidence: float | None = None
    needs_review: bool = False
