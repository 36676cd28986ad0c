import os
import re
import threading
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field

from . import _defaults
from .exceptions import ConfigurationError


_INTEGER = re.compile(r"[+-]?[0-9]+")


class ClientOptions(BaseModel):
    """User-specifiable options shared by every MetaClient of a process."""

    model_config = ConfigDict(frozen=True)

    timeout_ms: int = Field(default=_defaults.DEFAULT_TIMEOUT_MS, ge=0)
    debug: bool = False

    @property
    def timeout_sec(self) -> float:
        # Zero means "not configured", same as an unset environment variable.
        timeout_ms = self.timeout_ms or _defaults.DEFAULT_TIMEOUT_MS
        return timeout_ms / 1000


def _first_env(environ: Mapping[str, str], names: tuple[str, ...]) -> tuple[str, str]:
    for name in names:
        value = environ.get(name, "")
        if value != "":
            return name, value
    return names[0], ""


def load_client_options(environ: Mapping[str, str] | None = None) -> ClientOptions:
    """Builds ClientOptions from the given environment mapping.

    Args:
        environ: Environment to read, ``os.environ`` when omitted.

    Raises:
        ConfigurationError: If the timeout is set but is not a plain ASCII
            integer, or is negative.
    """
    if environ is None:
        environ = os.environ

    name, timeout = _first_env(environ, _defaults.TIMEOUT_ENV_VARS)
    if timeout == "":
        timeout_ms = _defaults.DEFAULT_TIMEOUT_MS
    else:
        if _INTEGER.fullmatch(timeout) is None:
            raise ConfigurationError(name, timeout, "must be an integer")
        timeout_ms = int(timeout)
        if timeout_ms < 0:
            raise ConfigurationError(name, timeout, "must not be negative")

    debug = environ.get(_defaults.DEBUG_ENV_VAR, "") != ""
    return ClientOptions(timeout_ms=timeout_ms, debug=debug)


_options: ClientOptions | None = None
_options_lock = threading.Lock()


def get_client_options() -> ClientOptions:
    """Returns the process-wide ClientOptions, reading the environment on first call only."""
    global _options
    if _options is None:
        with _options_lock:
            if _options is None:
                _options = load_client_options()
    return _options


def reset_client_options() -> None:
    """Forgets the cached process-wide options. Used by tests."""
    global _options
    with _options_lock:
        _options = None
