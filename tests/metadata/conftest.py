import pytest
import respx

from azmeta import ClientOptions, MetaClient
from azmeta.options import reset_client_options

from testing import ENDPOINT


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's environment out of option and endpoint resolution."""
    for name in (
        "AZURE_META_ENDPOINT",
        "GCP_META_ENDPOINT",
        "AZURE_TIMEOUT",
        "GCP_TIMEOUT",
        "AZMETA_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_client_options()
    yield
    reset_client_options()


@pytest.fixture
def client():
    """Create a metadata client pointing to a fake instance endpoint."""
    with MetaClient(ClientOptions(), endpoint=ENDPOINT) as client:
        yield client


@pytest.fixture
def mock_api():
    """Mock the instance and load-balancer metadata endpoints."""
    with respx.mock(assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def no_sleep(monkeypatch):
    """Make retry backoff instantaneous."""
    monkeypatch.setattr("time.sleep", lambda seconds: None)
