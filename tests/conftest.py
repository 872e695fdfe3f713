# tests/conftest.py
import os
import pytest
from fastapi.testclient import TestClient

# Keep test output readable; request lines are not needed here.
os.environ.setdefault("ACCESS_LOG", "false")

from kvcache.main import create_app  # import after env is set
from kvcache.services.store import Store

@pytest.fixture
def store():
    """A fresh store per test; pending TTL timers are cancelled afterwards."""
    s = Store()
    try:
        yield s
    finally:
        s.close()

@pytest.fixture(scope="function")
def client(store):
    """A TestClient for an app wired to the `store` fixture."""
    with TestClient(create_app(store)) as c:
        yield c
