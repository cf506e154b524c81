"""
Logging setup shared by the whole gridsat package.

Every module asks for the same "gridsat" logger, so one handler is attached the
first time it is requested and applications can still reconfigure it.
"""

import logging

LOGGER_NAME = "gridsat"


def get_logger(name=None):
    """
    Returns the package logger, or a child of it when ``name`` is given.

    If no handler is configured yet, INFO level messages go to the console.

    :param str name: Optional child logger suffix (e.g. "z3_solver").
    :returns: The configured logger.
    :rtype: logging.Logger
    """
    root = logging.getLogger(LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
        ))
        root.addHandler(handler)
        root.setLevel(logging.INFO)
    return root.getChild(name) if name else root
