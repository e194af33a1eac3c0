import logging


def get_logger():
    """
    Returns a "waypost.router" logger.
    """
    logger = logging.getLogger("waypost.router")
    logger.setLevel(logging.INFO)
    return logger
