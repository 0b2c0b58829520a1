import logging

__all__ = ["log", "set_log_level"]


log = logging.getLogger("cratesapi")
formatter = logging.Formatter(
    "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)
stream_handler = logging.StreamHandler()
stream_handler.setFormatter(formatter)
log.addHandler(stream_handler)
log.setLevel(logging.INFO)


def set_log_level(level: int | str) -> None:
    """Change the level of the cratesapi logger, e.g. "DEBUG" to see requests."""
    log.setLevel(level.upper() if isinstance(level, str) else level)
