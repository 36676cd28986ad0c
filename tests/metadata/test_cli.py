"""Tests for the azmeta command."""

import httpx
import pytest
import structlog
from click.testing import CliRunner
from testing import ENDPOINT, IMDS_HOST, UnreadableStream

from azmeta.cli import azmeta


@pytest.fixture(autouse=True)
def reset_structlog():
    """The command configures structlog against the runner's stderr."""
    yield
    structlog.reset_defaults()


def test_prints_value(mock_api):
    mock_api.get(host=IMDS_HOST, path="/metadata/instance/compute/name").mock(
        return_value=httpx.Response(200, text="my-vm")
    )

    result = CliRunner().invoke(azmeta, ["--endpoint", ENDPOINT, "compute/name"])

    assert result.exit_code == 0
    assert result.output == "my-vm\n"


def test_prints_default_when_unavailable(mock_api):
    mock_api.get(host=IMDS_HOST).mock(return_value=httpx.Response(404))

    result = CliRunner().invoke(
        azmeta, ["--endpoint", ENDPOINT, "compute/tags/env", "dev", "other"]
    )

    assert result.exit_code == 0
    assert result.output == "dev\n"


def test_endpoint_from_environment(mock_api):
    mock_api.get(host=IMDS_HOST, path="/metadata/instance/compute/name").mock(
        return_value=httpx.Response(200, text="my-vm")
    )

    result = CliRunner().invoke(
        azmeta, ["compute/name"], env={"AZURE_META_ENDPOINT": ENDPOINT}
    )

    assert result.exit_code == 0
    assert result.output == "my-vm\n"


def test_invalid_timeout_fails(monkeypatch):
    monkeypatch.setenv("AZURE_TIMEOUT", "later")

    result = CliRunner().invoke(azmeta, ["compute/name"])

    assert result.exit_code == 1
    assert "AZURE_TIMEOUT" in result.output


def test_unreadable_body_fails(monkeypatch):
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, stream=UnreadableStream())
    )
    original = httpx.Client

    def client_with_transport(**kwargs):
        kwargs["transport"] = transport
        return original(**kwargs)

    monkeypatch.setattr("azmeta.client.httpx.Client", client_with_transport)

    result = CliRunner().invoke(azmeta, ["--endpoint", ENDPOINT, "compute/name"])

    assert result.exit_code == 1
    assert "failed to read response body" in result.output


def test_json_logs(mock_api):
    mock_api.get(host=IMDS_HOST, path="/metadata/instance/compute/name").mock(
        return_value=httpx.Response(200, text="my-vm")
    )

    result = CliRunner().invoke(
        azmeta, ["--json-logs", "--endpoint", ENDPOINT, "compute/name"]
    )

    assert result.exit_code == 0
    assert result.output == "my-vm\n"
    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.processors.JSONRenderer)


def test_console_logs_by_default(mock_api):
    mock_api.get(host=IMDS_HOST, path="/metadata/instance/compute/name").mock(
        return_value=httpx.Response(200, text="my-vm")
    )

    result = CliRunner().invoke(azmeta, ["--endpoint", ENDPOINT, "compute/name"])

    assert result.exit_code == 0
    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
