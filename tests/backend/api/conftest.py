import pytest
from fastapi.testclient import TestClient

import main


@pytest.fixture
def client_for(monkeypatch):
    """Return a TestClient whose app serves the given session."""
    def _client(session):
        monkeypatch.setattr(main.app.state, "session", session)
        return TestClient(main.app)
    return _client


@pytest.fixture
def client(client_for, loaded_session):
    return client_for(loaded_session)
