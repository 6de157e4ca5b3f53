import pytest
from fastapi.testclient import TestClient

from livents.config import Settings
from livents.main import create_app
from livents.store import MemoryStore, SQLStore


@pytest.fixture
def settings() -> Settings:
    return Settings(service_name="Livents Test", store_backend="memory", heartbeat_seconds=0)


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def sql_store(tmp_path):
    store = SQLStore(f"sqlite:///{tmp_path / 'livents.db'}")
    store.init()
    yield store
    store.close()


@pytest.fixture
def client(settings, memory_store):
    app = create_app(settings=settings, store=memory_store)
    with TestClient(app) as test_client:
        yield test_client
