import os
import uuid
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from catalog_ingest.config.settings import Settings
from catalog_ingest.database.connection import close_pool, get_connection, init_pool
from catalog_ingest.database.models import SessionRecord
from catalog_ingest.database.repositories.session_repository import SessionRepository
from catalog_ingest.sessions.models import SessionStatus

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "catalog_ingest" / "database" / "schema.sql"


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "catalog_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
            conn.commit()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def store_id(integration_pool: None) -> Generator[str, None, None]:
    """A fresh store; everything written under it is deleted afterwards."""
    store = f"it-{uuid.uuid4().hex[:12]}"
    yield store
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM products WHERE store_id = %s", (store,))
            cur.execute("DELETE FROM components WHERE store_id = %s", (store,))
            cur.execute("DELETE FROM component_categories WHERE store_id = %s", (store,))
            cur.execute("DELETE FROM processing_sessions WHERE store_id = %s", (store,))
        conn.commit()


def make_session_record(store_id: str, **overrides: Any) -> SessionRecord:
    values: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "store_id": store_id,
        "status": SessionStatus.PENDING,
        "source_path": "/files/menu.pdf",
        "original_filename": "menu.pdf",
        "mime_type": "application/pdf",
        "file_size_bytes": 1024,
        "file_hash_sha256": "a" * 64,
    }
    values.update(overrides)
    return SessionRecord(**values)


@pytest.fixture
def seed_session(store_id: str) -> SessionRecord:
    return SessionRepository().create(make_session_record(store_id))
