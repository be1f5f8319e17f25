import json
import logging
import os
from logging.config import dictConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(debug: bool = False) -> None:
    """Configure logging for the resolution service.

    A JSON dictConfig named by LOGGING_CONFIG_FILE wins. Otherwise logs go to
    stderr, at DEBUG when `debug` is set and INFO when not; outside debug mode
    the aiohttp access log is limited to warnings so per-request lines do not
    drown out resolution events.
    """
    logging_config_file = os.getenv("LOGGING_CONFIG_FILE", "")

    if len(logging_config_file) > 0:
        with open(logging_config_file) as fl:
            dictConfig(json.load(fl))
        return

    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(logging.DEBUG if debug else logging.INFO)
    if not debug:
        logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
