import pytest
from testing import ENDPOINT

from azmeta import LookupKind, classify_key

QUERY = "?api-version=2017-08-01&format=text"
LB_URL = "http://169.254.169.254:80/metadata/loadbalancer?api-version=2021-02-01"


def test_plain_key():
    request = classify_key("compute/vmId", ENDPOINT)
    assert request.kind == LookupKind.PLAIN
    assert request.key == "compute/vmId"
    assert request.url == ENDPOINT + "compute/vmId" + QUERY
    assert request.tag == ""


def test_tag_key_is_rewritten():
    request = classify_key("compute/tags/environment", ENDPOINT)
    assert request.kind == LookupKind.TAG
    assert request.key == "compute/tags"
    assert request.url == ENDPOINT + "compute/tags" + QUERY
    assert request.tag == "environment"


def test_uppercase_tag_name():
    request = classify_key("compute/tags/Owner", ENDPOINT)
    assert request.kind == LookupKind.TAG
    assert request.tag == "Owner"


@pytest.mark.parametrize(
    "key",
    ["compute/tags", "compute/tags/", "compute/tags/1st", "compute/tags/_x"],
)
def test_not_a_tag_key(key):
    request = classify_key(key, ENDPOINT)
    assert request.kind == LookupKind.PLAIN
    assert request.url == ENDPOINT + key + QUERY


def test_load_balancer_key():
    key = "loadbalancer/publicIpAddresses/0/frontendIpAddress"
    request = classify_key(key, ENDPOINT)
    assert request.kind == LookupKind.LOAD_BALANCER
    assert request.key == key
    assert request.url == LB_URL


def test_load_balancer_wins_over_tag():
    request = classify_key("compute/tags/loadbalancer/x", ENDPOINT)
    assert request.kind == LookupKind.LOAD_BALANCER


def test_bare_loadbalancer_is_plain():
    request = classify_key("loadbalancer", ENDPOINT)
    assert request.kind == LookupKind.PLAIN
