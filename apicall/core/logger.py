import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional, TYPE_CHECKING

from .config import Config
from .exceptions import LoggerError

if TYPE_CHECKING:
    from ..utils.api.response_handler import ApiResponse

LOGGER_NAME = "apicall"

class Logger:
    _loggers: Dict[str, logging.Logger] = {}

    def __init__(self, config: Optional[Config] = None):
        """Initialize logger with configuration"""
        self.config = config or Config()

        if LOGGER_NAME in self._loggers:
            self.logger = self._loggers[LOGGER_NAME]
            for handler in self.logger.handlers[:]:
                self.logger.removeHandler(handler)
                handler.close()
        else:
            self.logger = logging.getLogger(LOGGER_NAME)
            self._loggers[LOGGER_NAME] = self.logger

        self.logger.setLevel(self._get_log_level())

        base_format = self.config.get(
            "logging.format",
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        self.formatter = logging.Formatter(
            f"{base_format} - caller:%(caller)s - action:%(action)s"
        )

        log_file = self.config.get("logging.file")
        if log_file:
            try:
                path = Path(log_file)
                if not path.parent.exists():
                    path.parent.mkdir(parents=True, exist_ok=True)

                max_size = self.config.get("logging.max_size", 1024 * 1024)  # 1MB default
                backup_count = self.config.get("logging.backup_count", 3)

                handler = RotatingFileHandler(
                    str(path),
                    maxBytes=max_size,
                    backupCount=backup_count,
                    encoding="utf-8"
                )
                handler.setFormatter(self.formatter)
                self.logger.addHandler(handler)
            except OSError as e:
                raise LoggerError(f"Failed to setup log file: {str(e)}")

        if self.config.get("logging.console_output", False):
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(self.formatter)
            self.logger.addHandler(console_handler)

    def _get_log_level(self) -> int:
        """Convert string log level to logging constant"""
        level_name = str(self.config.get("logging.level", "INFO")).upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise LoggerError(f"Invalid log level: {level_name}")
        return level

    def _prepare_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        extra_context = {
            'caller': '-',
            'action': '-'
        }
        if extra:
            extra_context.update(extra)
        return extra_context

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message"""
        self.logger.debug(message, extra=self._prepare_extra(kwargs.get('extra')))

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message"""
        self.logger.info(message, extra=self._prepare_extra(kwargs.get('extra')))

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message"""
        self.logger.warning(message, extra=self._prepare_extra(kwargs.get('extra')))

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message"""
        self.logger.error(
            message,
            exc_info=kwargs.get('exc_info'),
            extra=self._prepare_extra(kwargs.get('extra'))
        )

    def critical(self, message: str, **kwargs: Any) -> None:
        """Log critical message"""
        self.logger.critical(message, extra=self._prepare_extra(kwargs.get('extra')))

    def log_api_response(self, response: "ApiResponse", caller: str, action: str) -> None:
        """
        Log the outcome of one API exchange

        Args:
            response: ApiResponse returned by an operation
            caller: Name of the class issuing the call
            action: Name of the operation issuing the call
        """
        extra = {'caller': caller, 'action': action}
        prefix = f"[{caller}][{action}]"

        if response.is_successful:
            if response.is_ambiguous:
                self.warning(f"{prefix} Request rejected: {response.raw_content}", extra=extra)
            else:
                self.info(
                    f"{prefix} Request successful. Status code: {response.status_code}",
                    extra=extra
                )
        elif response.exception is not None:
            self.error(
                f"{prefix} Exception occurred: {response.error_message}",
                exc_info=response.exception,
                extra=extra
            )
        else:
            self.error(
                f"{prefix} Request failed. Status code: {response.status_code}. "
                f"Error: {response.error_message}",
                extra=extra
            )
