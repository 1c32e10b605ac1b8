"""Configure logging for the pocket-client command-line tool.

The library modules only create module loggers; handlers are installed here,
on the ``pocket_client`` logger, when the CLI starts.
"""

import logging
import sys

HANDLER_NAME = "pocket_client.cli"

DEBUG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_FORMAT = "[%(levelname)s] %(message)s"


def setup_logging(debug: bool = False) -> None:
    """Send package logs to stderr.

    Safe to call repeatedly: the handler from a previous call is replaced, so
    it always writes to the current ``sys.stderr`` and lines are not repeated.
    """
    package_logger = logging.getLogger("pocket_client")
    for handler in list(package_logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            package_logger.removeHandler(handler)
            handler.close()

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        logging.Formatter(
            DEBUG_FORMAT if debug else DEFAULT_FORMAT,
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # httpx logs every request at INFO
    transport_level = logging.DEBUG if debug else logging.WARNING
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(transport_level)
