from dataclasses import dataclass, field

from catalog_ingest.database.models import CategoryRecord, ComponentRecord
from catalog_ingest.database.repositories.catalog_repository import CatalogRepository
from catalog_ingest.extraction.models import (
    Draft,
    ExtractedComponent,
    ExtractedProduct,
    ExtractedStep,
)
from catalog_ingest.logging.logger import Log
from catalog_ingest.materializer.component_matcher import ComponentIndex
from catalog_ingest.materializer.exceptions import MaterializationError
from catalog_ingest.materializer.models import NewProduct, ResolvedOption, ResolvedStep
from catalog_ingest.sessions.models import ResultSummary


@dataclass
class _RunState:
    """Ids written so far in one materialization run."""

    product_ids: list[str] = field(default_factory=list)
    category_ids: list[str] = field(default_factory=list)
    component_ids: list[str] = field(default_factory=list)

    def summary(self, needs_review: bool) -> ResultSummary:
        return ResultSummary(
            products_created=len(self.product_ids),
            product_ids=list(self.product_ids),
            category_ids=list(self.category_ids),
            component_ids=list(self.component_ids),
            needs_review=needs_review,
        )


class CatalogMaterializer:
    """Turns a draft into catalog rows for one store.

    Products are always created, never merged with existing ones. Components
    are reused when they match the store's inventory by name or alias and
    created otherwise. Nothing is rolled back on failure.
    """

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        *,
        default_category: str,
        sales_channel: str,
    ) -> None:
        self._catalog_repo = catalog_repo
        self._default_category = default_category
        self._sales_channel = sales_channel

    def materialize(
        self,
        store_id: str,
        session_id: str,
        draft: Draft,
        *,
        extract_components: bool = True,
    ) -> ResultSummary:
        """Write every product of the draft to the catalog.

        Raises:
            MaterializationError: on the first failed write, carrying the
                summary of what was written before it.
        """
        run = _RunState()
        try:
            index = ComponentIndex(self._catalog_repo.list_components(store_id))
            categories = {
                c.name.strip().casefold(): c
                for c in self._catalog_repo.list_categories(store_id)
            }
        except Exception as exc:
            raise MaterializationError(
                f"Failed to load catalog for store {store_id}: {exc}",
                run.summary(draft.needs_review),
            ) from exc

        total = len(draft.products)
        for position, product in enumerate(draft.products, start=1):
            try:
                new_product = self._resolve_product(
                    store_id, product, index, categories, run, extract_components
                )
                product_id = self._catalog_repo.create_product(
                    store_id, session_id, new_product
                )
            except Exception as exc:
                Log.error(
                    f"Materialization of session {session_id} stopped at product "
                    f"{position}/{total} ({product.name!r}): {exc}"
                )
                raise MaterializationError(
                    f"Failed to create product {position}/{total} '{product.name}': {exc}",
                    run.summary(draft.needs_review),
                ) from exc
            run.product_ids.append(product_id)

        Log.info(
            f"Materialized session {session_id}: {len(run.product_ids)} products, "
            f"{len(run.component_ids)} new components, "
            f"{len(run.category_ids)} new categories"
        )
        return run.summary(draft.needs_review)

    def _resolve_product(
        self,
        store_id: str,
        product: ExtractedProduct,
        index: ComponentIndex,
        categories: dict[str, CategoryRecord],
        run: _RunState,
        extract_components: bool,
    ) -> NewProduct:
        steps = [
            self._resolve_step(store_id, step, index, categories, run, extract_components)
            for step in product.steps
        ]
        return NewProduct(
            name=product.name,
            description=product.description,
            category=product.category,
            variations=[(v.name, dict(v.prices)) for v in product.variations],
            steps=steps,
        )

    def _resolve_step(
        self,
        store_id: str,
        step: ExtractedStep,
        index: ComponentIndex,
        categories: dict[str, CategoryRecord],
        run: _RunState,
        extract_components: bool,
    ) -> ResolvedStep:
        options: list[ResolvedOption] = []
        for option in step.options:
            component_id = None
            if extract_components and option.component is not None:
                component_id = self._resolve_component(
                    store_id, option.component, index, categories, run
                ).id
            options.append(
                ResolvedOption(
                    name=option.name,
                    prices=dict(option.prices),
                    component_id=component_id,
                )
            )
        return ResolvedStep(
            title=step.title,
            is_required=step.is_required,
            selection_type=step.selection_type,
            options=options,
        )

    def _resolve_component(
        self,
        store_id: str,
        component: ExtractedComponent,
        index: ComponentIndex,
        categories: dict[str, CategoryRecord],
        run: _RunState,
    ) -> ComponentRecord:
        existing = index.match(component.name)
        if existing is not None:
            return existing

        category = self._resolve_category(store_id, component.category, categories, run)
        created = self._catalog_repo.create_component(
            store_id, category.id, component, self._sales_channel
        )
        index.add(created)
        run.component_ids.append(created.id)
        Log.debug(f"Created component {created.name!r} in category {category.name!r}")
        return created

    def _resolve_category(
        self,
        store_id: str,
        name: str | None,
        categories: dict[str, CategoryRecord],
        run: _RunState,
    ) -> CategoryRecord:
        category_name = (name or "").strip() or self._default_category
        key = category_name.casefold()
        category = categories.get(key)
        if category is None:
            category = self._catalog_repo.create_category(store_id, category_name)
            categories[key] = category
            run.category_ids.append(category.id)
        return category
