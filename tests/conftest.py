"""Shared pytest fixtures for dataverse_client tests."""

import json
from unittest.mock import Mock

import pytest
import requests

from dataverse_client.citation import new_citation_metadata
from dataverse_client.compounds import new_author, new_contact
from dataverse_client.config import reset_config

BASE = "https://demo.dataverse.org/api"
TOKEN = "00000000-1111-2222-3333-444444444444"


def make_response(data=None, status_code=200, status="OK", message=None):
    """Build a mock requests.Response carrying a Dataverse envelope."""
    envelope = {"status": status}
    if data is not None:
        envelope["data"] = data
    if message is not None:
        envelope["message"] = message

    response = Mock()
    response.status_code = status_code
    response.json.return_value = envelope
    response.text = json.dumps(envelope)
    return response


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
    """Keep tests independent of user config files and environment."""
    for var in ("DATAVERSE_API_BASE_URL", "DATAVERSE_API_TIMEOUT", "DATAVERSE_API_TOKEN"):
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def mock_requests(monkeypatch):
    """Replace the requests module used by dataverse_client.request.

    Exception classes stay real so ``except requests.RequestException``
    keeps working.
    """
    mock = Mock()
    mock.RequestException = requests.RequestException
    mock.Timeout = requests.Timeout
    monkeypatch.setattr("dataverse_client.request.requests", mock)
    return mock


@pytest.fixture
def visus_uri():
    return f"{BASE}/dataverses/visus"


@pytest.fixture
def sample_citation():
    """The reference citation document used across tests."""
    return new_citation_metadata(
        title="title",
        authors=new_author("author", "the"),
        contact=new_contact("contact", "a", "test@test.com"),
        descriptions=["description"],
        depositor_surname="depositor",
        depositor_christian_name="ze",
        deposit_date="2022-01-01",
    )


@pytest.fixture
def token():
    return TOKEN


@pytest.fixture
def response():
    """Factory for mock envelope responses (see make_response)."""
    return make_response
