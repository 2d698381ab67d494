import logging
from logging import Logger
from typing import Optional

logging.basicConfig(
    level=logging.INFO,
    format="[%(levelname)s] %(asctime)s - %(message)s",
    datefmt="%d-%m-%Y %H-%M-%S",
)


logger = logging.getLogger("minimal_web_server")

def get_logger(name: Optional[str] = None) -> Logger:
    if not name:
        return logger
    if name.startswith("minimal_web_server"):
        return logging.getLogger(name)
    return logging.getLogger(f"minimal_web_server.{name}")

def set_level(level: str) -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        msg = f"unknown log level: {level}"
        raise ValueError(msg)
    logger.setLevel(numeric)
