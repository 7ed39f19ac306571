"""
Integration test fixtures
"""

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from kct_admin.api.dependencies import get_db, get_function_client
from kct_admin.api.main import create_app
from kct_admin.config.settings import get_settings


@pytest.fixture
def app(db_session, functions, settings):
    """API app wired to the test database, the function stub and test settings."""
    app = create_app()
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_function_client] = lambda: functions
    app.dependency_overrides[get_settings] = lambda: settings
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def queued(monkeypatch):
    """Replace a task's .delay with a recorder; returns the recorded calls."""

    def _patch(task, task_id="task-123"):
        calls = []

        def delay(*args, **kwargs):
            calls.append((args, kwargs))
            return SimpleNamespace(id=task_id)

        monkeypatch.setattr(task, "delay", delay)
        return calls

    return _patch
