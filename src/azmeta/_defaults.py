"""Shared configuration defaults for the metadata client."""

# Environment variable names. The GCP_* names are still accepted because
# existing deployments were configured with them.
ENDPOINT_ENV_VARS: tuple[str, ...] = ("AZURE_META_ENDPOINT", "GCP_META_ENDPOINT")
TIMEOUT_ENV_VARS: tuple[str, ...] = ("AZURE_TIMEOUT", "GCP_TIMEOUT")
DEBUG_ENV_VAR: str = "AZMETA_DEBUG"

DEFAULT_ENDPOINT: str = "http://169.254.169.254/metadata/instance/"
LB_METADATA_ENDPOINT: str = (
    "http://169.254.169.254:80/metadata/loadbalancer?api-version=2021-02-01"
)
INSTANCE_QUERY: str = "?api-version=2017-08-01&format=text"

METADATA_HEADER: tuple[str, str] = ("Metadata", "true")

DEFAULT_TIMEOUT_MS: int = 500

# Retry configuration for transient errors (connection failures, 429/5xx).
MAX_RETRIES: int = 3
RETRY_INITIAL_DELAY_SEC: float = 0.1
RETRY_MAX_DELAY_SEC: float = 2.0
# Every 5xx status is retried except these, and so is 429 Too Many Requests.
NON_RETRYABLE_SERVER_STATUS_CODES: frozenset[int] = frozenset({501})
TOO_MANY_REQUESTS: int = 429
