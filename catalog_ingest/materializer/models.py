from dataclasses import dataclass, field


@dataclass(frozen=True)
class ResolvedOption:
    """Composition option with its component reference resolved to an inventory id."""

    name: str
    prices: dict[str, float]
    component_id: str | None = None


@dataclass(frozen=True)
class ResolvedStep:
    title: str
    is_required: bool
    selection_type: str
    options: list[ResolvedOption] = field(default_factory=list)


@dataclass(frozen=True)
class NewProduct:
    """A product ready to be written to the catalog."""

    name: str
    description: str
    category: str
    variations: list[tuple[str, dict[str, float]]]
    steps: list[ResolvedStep] = field(default_factory=list)
