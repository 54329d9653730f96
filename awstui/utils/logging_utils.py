import logging
import sys


def get_logger(name: str = "awstui", level: int = logging.WARNING) -> logging.Logger:
    """
    Return a logger under the ``awstui`` hierarchy.

    Only the root ``awstui`` logger gets a handler; it writes to stderr so
    table/json output on stdout stays clean.
    """
    root = logging.getLogger("awstui")
    if not root.handlers:
        root.setLevel(level)
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        root.addHandler(handler)
    return logging.getLogger(name)


def set_level(level: int) -> None:
    logging.getLogger("awstui").setLevel(level)
