import logging
import sys

from pythonjsonlogger import jsonlogger

HANDLER_NAME = "checkout-json"


def setup_logging(level: str = "INFO") -> None:
    """
    Send JSON log lines to stdout.

    Safe to call more than once: the handler is installed a single time and
    later calls only change the level.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if any(h.get_name() == HANDLER_NAME for h in root_logger.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(jsonlogger.JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={"levelname": "level", "name": "logger"},
    ))
    root_logger.addHandler(handler)

    # Silence noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("stripe").setLevel(logging.WARNING)
