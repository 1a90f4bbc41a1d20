from collections.abc import Iterator
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from fxrates.core.config import Settings
from fxrates.main import create_app
from fxrates.services.store import RateStore


PROVIDER_URL = "http://provider.test/live"
SEED_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        data_url=PROVIDER_URL,
        sync_on_startup=False,
        log_json=False,
    )


@pytest.fixture
def store() -> Iterator[RateStore]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    rate_store = RateStore(engine)
    rate_store.create_schema()
    yield rate_store
    engine.dispose()


@pytest.fixture
def seeded_store(store: RateStore) -> RateStore:
    store.apply_snapshot(
        {"USD": Decimal("1"), "EUR": Decimal("0.9"), "JPY": Decimal("150")},
        SEED_TIME,
    )
    return store


@pytest.fixture
def client(settings: Settings, seeded_store: RateStore) -> Iterator[TestClient]:
    app = create_app(settings, seeded_store)
    with TestClient(app) as test_client:
        yield test_client
