"""azmeta - Azure instance metadata lookups for template rendering."""

from .client import LookupOutcome, LookupResult, MetaClient
from .exceptions import ConfigurationError, MetadataException, MetadataReadError
from .funcs import AzureFuncs, create_azure_funcs
from .keys import LookupKind, LookupRequest, classify_key
from .options import ClientOptions, get_client_options, load_client_options

__all__ = [
    # Client
    "MetaClient",
    "LookupResult",
    "LookupOutcome",
    # Template namespace
    "AzureFuncs",
    "create_azure_funcs",
    # Keys
    "LookupKind",
    "LookupRequest",
    "classify_key",
    # Options
    "ClientOptions",
    "get_client_options",
    "load_client_options",
    # Exceptions
    "MetadataException",
    "ConfigurationError",
    "MetadataReadError",
]
