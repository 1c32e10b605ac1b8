"""Shared test fixtures."""

import pytest

from pocket_client.client import PocketClient
from pocket_client.config import CONSUMER_KEY_ENV
from pocket_client.models import AddInput


@pytest.fixture(autouse=True)
def no_consumer_key_env(monkeypatch):
    """Keep a developer's own POCKET_CONSUMER_KEY out of the tests."""
    monkeypatch.delenv(CONSUMER_KEY_ENV, raising=False)


@pytest.fixture
def client():
    with PocketClient("key") as c:
        yield c


@pytest.fixture
def add_input() -> AddInput:
    return AddInput(
        url="some_url.com",
        title="some_title",
        tags=["some_tag_1", "some_tag_2"],
        access_token="access-to-ken",
    )
