from typing import NotRequired, TypedDict
import logging

from .utils import resolve_config


class LoggerConfig(TypedDict):
    name: NotRequired[str]
    is_enabled: NotRequired[bool]
    level: NotRequired[int]
    format: NotRequired[str]


class LoggerConfigRequired(TypedDict):
    name: str
    is_enabled: bool
    level: int
    format: str


DEFAULT_LOGGER_CONFIG: LoggerConfigRequired = {
    "name": "uplang",
    "is_enabled": True,
    "level": logging.DEBUG,
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}


class Logger:
    def __init__(self, config: LoggerConfig | None = None):
        self.config = resolve_config(config or {}, DEFAULT_LOGGER_CONFIG)
        self.logger = self.set_configuration()

    def set_configuration(self) -> logging.Logger:
        if not self.config["is_enabled"]:
            # private to this instance, named loggers are shared by every parse
            logger = logging.Logger(self.config["name"])
            logger.disabled = True
            return logger

        logger = logging.getLogger(self.config["name"])
        logger.setLevel(self.config["level"])
        if not logger.handlers:
            self.formatter = logging.Formatter(self.config["format"])
            self.ch = logging.StreamHandler()
            self.ch.setFormatter(self.formatter)
            logger.addHandler(self.ch)
        return logger
