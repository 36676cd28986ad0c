import sys

import click

from .client import MetaClient
from .exceptions import ConfigurationError, MetadataReadError
from .options import get_client_options
from .utils.logging import configure_logging, configure_logging_early


@click.command()
@click.option(
    "--endpoint",
    envvar="AZURE_META_ENDPOINT",
    default=None,
    help="Instance metadata base URL.",
)
@click.option("--debug", is_flag=True, help="Log retries and default fallbacks.")
@click.option(
    "--json-logs", is_flag=True, help="Write log events to stderr as JSON lines."
)
@click.argument("key")
@click.argument("defaults", nargs=-1)
def azmeta(
    endpoint: str | None,
    debug: bool,
    json_logs: bool,
    key: str,
    defaults: tuple[str, ...],
):
    """Print the metadata value of KEY, or the first of DEFAULTS if it can't be read."""
    try:
        options = get_client_options()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if debug and not options.debug:
        options = options.model_copy(update={"debug": True})
    configure_logging_early()
    configure_logging(debug=options.debug, json=json_logs)

    with MetaClient(options, endpoint=endpoint) as client:
        try:
            value = client.meta(key, *defaults)
        except MetadataReadError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

    click.echo(value)
