# tests/conftest.py

import pytest
from fastapi.testclient import TestClient

from user_inputs_api.app.core.config import Settings
from user_inputs_api.app.core.errors import ExternalMirrorError
from user_inputs_api.app.core.store import UserInputStore
from user_inputs_api.app.main import create_app
from user_inputs_api.app.schemas.user_input import UserInput
from user_inputs_api.app.services.user_input_service import UserInputService


class FakeMirror:
    """Stand-in for SheetsAppender that records rows in memory."""

    def __init__(self):
        self.rows = []
        self.fail = False

    def append_user_input(self, record):
        if self.fail:
            raise ExternalMirrorError("quota exceeded")
        self.rows.append(record.as_row())
        return {"updates": {"updatedRows": 1}}


@pytest.fixture
def test_settings():
    return Settings(spreadsheet_id="", seed_demo_records=True, log_file="")


@pytest.fixture
def demo_store():
    return UserInputStore.with_demo_records()


@pytest.fixture
def fake_mirror():
    return FakeMirror()


@pytest.fixture
def service(demo_store, fake_mirror):
    return UserInputService(demo_store, mirror=fake_mirror)


@pytest.fixture
def client(test_settings, service):
    app = create_app(test_settings)
    app.state.user_input_service = service
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_user_input():
    return UserInput(name="Mia", age=22, commute_method="Walk", college="MIT", hobbies="Chess")


@pytest.fixture
def client_secrets_file(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text(
        """
        {
          "installed": {
            "client_id": "client-123.apps.googleusercontent.com",
            "client_secret": "s3cret",
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "redirect_uris": ["http://localhost"]
          }
        }
        """
    )
    return str(path)
