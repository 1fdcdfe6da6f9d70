"""Best-effort matching of extracted components against a store's inventory.

Two lookups, in order: exact name (case-insensitive, trimmed), then alias
containment (the extracted name is a case-insensitive substring of one of an
existing component's aliases).
"""

from catalog_ingest.database.models import ComponentRecord


def _key(value: str) -> str:
    return value.strip().casefold()


class ComponentIndex:
    """In-memory view of a store's components for one materialization run."""

    def __init__(self, components: list[ComponentRecord]) -> None:
        self._components: list[ComponentRecord] = []
        self._by_name: dict[str, ComponentRecord] = {}
        for component in components:
            self.add(component)

    def __len__(self) -> int:
        return len(self._components)

    def add(self, component: ComponentRecord) -> None:
        """Register a component; the first one registered under a name wins."""
        self._components.append(component)
        self._by_name.setdefault(_key(component.name), component)

    def match(self, name: str) -> ComponentRecord | None:
        """Return the existing component for `name`, or None."""
        query = _key(name)
        if not query:
            return None
        exact = self._by_name.get(query)
        if exact is not None:
            return exact
        for component in self._components:
            if any(query in _key(alias) for alias in component.aliases):
                return component
        return None
