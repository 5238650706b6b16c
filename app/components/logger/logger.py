import logging
import sys

from app.components.logger.logger_interface import LoggerInterface


class Logger(LoggerInterface):
    def __init__(self, log_format: str, log_level: str) -> None:
        self.log_format = log_format
        self.log_level = getattr(logging, log_level.upper(), logging.INFO)

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(self.log_format))

        root = logging.getLogger("app")
        root.setLevel(self.log_level)
        if not root.handlers:
            root.addHandler(handler)

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(f"app.{name}")
