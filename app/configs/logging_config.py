import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger. A no-op when something (uvicorn, pytest) already attached handlers to it"""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)

    # stripe logs every request at INFO, keep it quiet unless we are debugging
    if logging.getLogger().getEffectiveLevel() > logging.DEBUG:
        logging.getLogger("stripe").setLevel(logging.WARNING)
