import pytest
from fastapi.testclient import TestClient

from core.settings import Settings
from db.base import close_db, create_database, init_db

from helpers import ALICE_STATS, FakeExtractor, batch_item


@pytest.fixture
def database(tmp_path):
    database = create_database(f"sqlite:///{tmp_path / 'stats.db'}")
    init_db(database)
    try:
        yield database
    finally:
        close_db(database)


@pytest.fixture
def fake_extractor():
    return FakeExtractor(
        stats={"123": dict(ALICE_STATS)},
        batch={
            "1": batch_item("1", "One", 2.5),
            "2": batch_item("2", "Two", 1.1),
            "3": batch_item("3", "Three", 0.7),
        },
    )


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'api.db'}",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        scheduler_enabled=False,
        sweep_delay_seconds=0,
        log_format="console",
        log_level="WARNING",
    )


@pytest.fixture
def client(test_settings, fake_extractor):
    from main import create_app

    app = create_app(test_settings, extractor=fake_extractor)
    with TestClient(app) as test_client:
        yield test_client
