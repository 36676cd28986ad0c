import logging
import sys

import structlog

# All azmeta programs configure logging through this module. Diagnostics go to
# stderr because stdout carries lookup results.


def configure_logging_early():
    """Configures standard Python logging module.

    httpx and httpcore log through the standard logging module; their lines
    are dropped unless it gets configured. Keeping them helps debugging
    connectivity to the metadata endpoint.
    """
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s logger=%(name)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _processors(renderer) -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
        renderer,
    ]


def configure_logging(debug: bool = False, json: bool = False):
    """Configures structlog for an azmeta program.

    Args:
        debug: Emit debug level events (retry attempts, default fallbacks).
        json: Render events as JSON lines instead of the console format.
    """
    if json:
        processors = _processors(structlog.processors.JSONRenderer())
        processors.insert(-1, structlog.processors.format_exc_info)
    else:
        processors = _processors(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.WARNING
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

