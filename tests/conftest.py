"""Pytest configuration and shared fixtures."""

import os

import pytest
import responses

# Required boot configuration for tests
os.environ.setdefault("ARTEMIS_API_URL", "http://api.test")
os.environ.setdefault("ARTEMIS_IDENTITY_PUBLISHABLE_KEY", "pk_test_artemis")

API_URL = os.environ["ARTEMIS_API_URL"]


@pytest.fixture
def anyio_backend():
    """Run async tests on asyncio only."""
    return "asyncio"


@pytest.fixture
def mocked_responses():
    """Provide an active responses mock for requests made on any thread."""
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def api_url():
    """Base URL the tests point clients at."""
    return API_URL
