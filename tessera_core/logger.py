import logging, json, sys, time, os

from .constants import ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL


def _level(level):
    # unknown names fall back to DEFAULT_LOG_LEVEL
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else logging.getLevelName(DEFAULT_LOG_LEVEL)


def get_logger(name="tessera", level=None, to_file=None):
    """Unified structured logger for all tessera components."""
    logger = logging.getLogger(name)
    if level is None:
        level = os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)
    logger.setLevel(_level(level))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            fmt=json.dumps({
                "ts": "%(asctime)s",
                "level": "%(levelname)s",
                "name": "%(name)s",
                "msg": "%(message)s"
            }),
            datefmt="%Y-%m-%dT%H:%M:%SZ",
        )
        formatter.converter = time.gmtime  # Use UTC timestamps
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        if to_file:
            # Ensure the directory exists before writing
            os.makedirs(os.path.dirname(to_file) or ".", exist_ok=True)
            file_handler = logging.FileHandler(to_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
