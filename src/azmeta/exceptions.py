"""Exception hierarchy for metadata lookups."""


class MetadataException(Exception):
    """Base exception for all metadata-related errors."""

    pass


class ConfigurationError(MetadataException):
    """Raised when the client configuration taken from the environment is invalid."""

    def __init__(self, name: str, value: str, reason: str):
        self._name = name
        self._value = value
        super().__init__(f"invalid {name} value '{value}' - {reason}")

    @property
    def name(self) -> str:
        return self._name

    @property
    def value(self) -> str:
        return self._value


class MetadataReadError(MetadataException):
    """Raised when a successful response body cannot be read."""

    def __init__(self, url: str, message: str):
        self._url = url
        super().__init__(f"failed to read response body from {url}: {message}")

    @property
    def url(self) -> str:
        return self._url
