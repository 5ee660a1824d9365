import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%H:%M:%S"


def init_logging(level=logging.INFO, log_path=None, stream=None):
    """
    Attach a console handler (and optionally a UTF-8 log file at DEBUG) to the root logger.
    Returns the handlers that were added.
    """
    fmt = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    root_logger = logging.getLogger()

    sh = logging.StreamHandler(stream if stream is not None else sys.stderr)
    sh.setFormatter(fmt)
    sh.setLevel(level)
    root_logger.addHandler(sh)
    handlers = [sh]

    if log_path:
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setFormatter(fmt)
        fh.setLevel(logging.DEBUG)
        root_logger.addHandler(fh)
        handlers.append(fh)
        level = logging.DEBUG

    root_logger.setLevel(level)
    return handlers
