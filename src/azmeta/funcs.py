"""Template namespace exposing metadata lookups as ``azure().meta(...)``."""

import threading
from typing import Any, Callable, Dict

from .client import MetaClient
from .options import ClientOptions, get_client_options


def create_azure_funcs(
    options: ClientOptions | None = None,
    cancel_event: threading.Event | None = None,
) -> Dict[str, Callable[[], Any]]:
    """Returns the functions to merge into a template engine's namespace.

    Example:
        ```
        env = jinja2.Environment()
        env.globals.update(create_azure_funcs())
        env.from_string('{{ azure().meta("compute/tags/env", "dev") }}').render()
        ```
    """
    ns = AzureFuncs(options=options, cancel_event=cancel_event)
    return {"azure": lambda: ns}


class AzureFuncs:
    """Namespace object owning a single, lazily created MetaClient."""

    def __init__(
        self,
        options: ClientOptions | None = None,
        cancel_event: threading.Event | None = None,
    ):
        self._options: ClientOptions = (
            options if options is not None else get_client_options()
        )
        self._cancel_event = cancel_event
        self._meta: MetaClient | None = None
        self._meta_lock = threading.Lock()

    def _client(self) -> MetaClient:
        meta = self._meta
        if meta is not None:
            return meta

        with self._meta_lock:
            if self._meta is None:
                self._meta = MetaClient(self._options, cancel_event=self._cancel_event)
            return self._meta

    def meta(self, key: str, *defaults: str) -> str:
        return self._client().meta(key, *defaults)
