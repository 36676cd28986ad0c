"""Classification of metadata keys into the request they translate to."""

from enum import Enum

from pydantic import BaseModel

from . import _defaults

_LB_MARKER = "loadbalancer/"
_TAGS_KEY = "compute/tags"
_TAG_PREFIX = _TAGS_KEY + "/"


class LookupKind(str, Enum):
    LOAD_BALANCER = "loadbalancer"
    TAG = "tag"
    PLAIN = "plain"


class LookupRequest(BaseModel):
    """A metadata key resolved to a target URL and a parsing strategy."""

    kind: LookupKind
    key: str
    url: str
    # Set for tag queries only.
    tag: str = ""


def _tag_name(key: str) -> str:
    """Returns the tag name of a ``compute/tags/<name>`` key, or "" if the key isn't one."""
    if not key.startswith(_TAG_PREFIX):
        return ""
    name = key[len(_TAG_PREFIX) :].split("/", 1)[0]
    if name == "" or not name[0].isascii() or not name[0].isalpha():
        return ""
    return name


def classify_key(key: str, endpoint: str) -> LookupRequest:
    """Resolves a metadata key against the instance endpoint.

    Load-balancer keys win over tag keys, which win over plain keys.
    """
    if _LB_MARKER in key:
        return LookupRequest(
            kind=LookupKind.LOAD_BALANCER,
            key=key,
            url=_defaults.LB_METADATA_ENDPOINT,
        )

    tag = _tag_name(key)
    if tag:
        return LookupRequest(
            kind=LookupKind.TAG,
            key=_TAGS_KEY,
            url=endpoint + _TAGS_KEY + _defaults.INSTANCE_QUERY,
            tag=tag,
        )

    return LookupRequest(
        kind=LookupKind.PLAIN,
        key=key,
        url=endpoint + key + _defaults.INSTANCE_QUERY,
    )
