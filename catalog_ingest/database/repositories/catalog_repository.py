from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from catalog_ingest.database.connection import get_connection
from catalog_ingest.database.models import CategoryRecord, ComponentRecord
from catalog_ingest.extraction.models import ExtractedComponent
from catalog_ingest.materializer.models import NewProduct


class CatalogRepository:
    """Writes products, components and component categories for a store."""

    def list_components(self, store_id: str) -> list[ComponentRecord]:
        """All components of a store, oldest first."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, store_id, name, category_id, aliases
                    FROM components
                    WHERE store_id = %s
                    ORDER BY created_at, id
                    """,
                    (store_id,),
                )
                rows = cur.fetchall()
        return [
            ComponentRecord(
                id=str(row["id"]),
                store_id=row["store_id"],
                name=row["name"],
                category_id=str(row["category_id"]),
                aliases=list(row["aliases"] or []),
            )
            for row in rows
        ]

    def list_categories(self, store_id: str) -> list[CategoryRecord]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, store_id, name
                    FROM component_categories
                    WHERE store_id = %s
                    ORDER BY created_at, id
                    """,
                    (store_id,),
                )
                rows = cur.fetchall()
        return [
            CategoryRecord(id=str(row["id"]), store_id=row["store_id"], name=row["name"])
            for row in rows
        ]

    def create_category(self, store_id: str, name: str) -> CategoryRecord:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO component_categories (store_id, name)
                    VALUES (%s, %s)
                    RETURNING id
                    """,
                    (store_id, name),
                )
                row = cur.fetchone()
            conn.commit()
        if row is None:
            raise RuntimeError(f"Insert of category {name!r} returned no id")
        return CategoryRecord(id=str(row[0]), store_id=store_id, name=name)

    def create_component(
        self,
        store_id: str,
        category_id: str,
        component: ExtractedComponent,
        sales_channel: str,
    ) -> ComponentRecord:
        """Insert an AI-extracted component under the given category."""
        aliases = sorted(component.aliases)
        default_prices = (
            Jsonb({sales_channel: component.default_price})
            if component.default_price is not None
            else None
        )
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO components
                    (store_id, category_id, name, aliases, default_prices, ai_extracted)
                    VALUES (%s, %s, %s, %s, %s, TRUE)
                    RETURNING id
                    """,
                    (store_id, category_id, component.name, aliases, default_prices),
                )
                row = cur.fetchone()
            conn.commit()
        if row is None:
            raise RuntimeError(f"Insert of component {component.name!r} returned no id")
        return ComponentRecord(
            id=str(row[0]),
            store_id=store_id,
            name=component.name,
            category_id=category_id,
            aliases=aliases,
        )

    def create_product(self, store_id: str, session_id: str, product: NewProduct) -> str:
        """Insert a product with its variations and composition in one transaction.

        Returns:
            The new product id.
        """
        with get_connection() as conn:
            with conn.transaction():
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        INSERT INTO products
                        (store_id, processing_session_id, name, description,
                         category, has_composition)
                        VALUES (%s, %s, %s, %s, %s, %s)
                        RETURNING id
                        """,
                        (
                            store_id,
                            session_id,
                            product.name,
                            product.description,
                            product.category,
                            bool(product.steps),
                        ),
                    )
                    row = cur.fetchone()
                    if row is None:
                        raise RuntimeError(f"Insert of product {product.name!r} returned no id")
                    product_id = row[0]

                    for position, (name, prices) in enumerate(product.variations):
                        cur.execute(
                            """
                            INSERT INTO product_variations
                            (product_id, name, prices, is_default, position)
                            VALUES (%s, %s, %s, %s, %s)
                            """,
                            (product_id, name, Jsonb(prices), position == 0, position),
                        )

                    for step_position, step in enumerate(product.steps):
                        cur.execute(
                            """
                            INSERT INTO composition_steps
                            (product_id, title, is_required, selection_type, position)
                            VALUES (%s, %s, %s, %s, %s)
                            RETURNING id
                            """,
                            (
                                product_id,
                                step.title,
                                step.is_required,
                                step.selection_type,
                                step_position,
                            ),
                        )
                        step_row = cur.fetchone()
                        if step_row is None:
                            raise RuntimeError(f"Insert of step {step.title!r} returned no id")
                        for option_position, option in enumerate(step.options):
                            cur.execute(
                                """
                                INSERT INTO composition_options
                                (step_id, component_id, name, prices, position)
                                VALUES (%s, %s, %s, %s, %s)
                                """,
                                (
                                    step_row[0],
                                    option.component_id,
                                    option.name,
                                    Jsonb(option.prices),
                                    option_position,
                                ),
                            )
        return str(product_id)

    def count_products_for_session(self, session_id: str) -> int:
        """Number of products a session wrote to the catalog."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT COUNT(*) FROM products WHERE processing_session_id = %s",
                    (session_id,),
                )
                row = cur.fetchone()
        return int(row[0]) if row is not None else 0
