# slot_engine/infrastructure/logging/log_manager.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional, Union


DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

DEFAULT_LOGGING_CONFIG = {
    'level': 'INFO',
    'console': True,
    'console_level': 'INFO',
    'file': {
        'enabled': False,
        'path': 'logs/slot_engine.log',
        'level': 'DEBUG',
        'max_bytes': 10 * 1024 * 1024,  # 10 MB
        'backup_count': 5
    },
    'loggers': {
        'domain.machine': {'level': 'INFO'},
        'domain.events': {'level': 'INFO'},
        'infrastructure.rng': {'level': 'INFO'},
        'infrastructure.config': {'level': 'INFO'},
        'application.simulation': {'level': 'INFO'}
    }
}


class LogManager:
    """
    Centralized logging configuration.

    Loggers throughout the engine are named by layer ("domain.machine.scanner",
    "infrastructure.rng", ...) so levels can be tuned per layer from config.
    """
    def __init__(self):
        self.root_logger = logging.getLogger()
        self.loggers = {}  # name -> logger
        self.handlers = {}  # name -> handler
        self.initialized = False

    def initialize(self, config: Dict[str, Any]):
        """
        Configure handlers and logger levels. Only the first call has effect
        until reset() is called.

        Args:
            config: Logging configuration dictionary (see DEFAULT_LOGGING_CONFIG)
        """
        if self.initialized:
            return

        log_level = self._get_log_level(config.get('level', 'INFO'))
        formatter = logging.Formatter(
            config.get('format', DEFAULT_FORMAT),
            config.get('date_format', DEFAULT_DATE_FORMAT)
        )

        self.root_logger.setLevel(log_level)
        for handler in list(self.root_logger.handlers):
            self.root_logger.removeHandler(handler)

        if config.get('console', True):
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(self._get_log_level(config.get('console_level', log_level)))
            console_handler.setFormatter(formatter)
            self.root_logger.addHandler(console_handler)
            self.handlers['console'] = console_handler

        file_config = config.get('file', {})
        if file_config.get('enabled', False):
            file_path = file_config.get('path', 'logs/slot_engine.log')

            log_dir = os.path.dirname(file_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)

            file_handler = RotatingFileHandler(
                file_path,
                maxBytes=file_config.get('max_bytes', 10 * 1024 * 1024),
                backupCount=file_config.get('backup_count', 5)
            )
            file_handler.setLevel(self._get_log_level(file_config.get('level', log_level)))
            file_handler.setFormatter(formatter)
            self.root_logger.addHandler(file_handler)
            self.handlers['file'] = file_handler

        # Parents before children so a child's level overrides its parent's
        logger_configs = config.get('loggers', {})
        for logger_name in sorted(logger_configs, key=lambda name: len(name.split('.'))):
            logger_config = logger_configs[logger_name]
            logger = logging.getLogger(logger_name)
            logger.setLevel(self._get_log_level(logger_config.get('level', log_level)))
            logger.propagate = logger_config.get('propagate', True)
            self.loggers[logger_name] = logger

            self.root_logger.debug(
                f"Configured logger '{logger_name}' with level={logging.getLevelName(logger.level)}, "
                f"propagate={logger.propagate}"
            )

        self.root_logger.debug("Logging system initialized")
        self.initialized = True

    def reset(self):
        """Remove handlers installed by initialize() so it can run again."""
        for handler in self.handlers.values():
            self.root_logger.removeHandler(handler)
            handler.close()
        self.handlers.clear()
        self.loggers.clear()
        self.initialized = False

    def _get_log_level(self, level_name: Union[str, int]) -> int:
        """Convert a level name (DEBUG, INFO, ...) or number to its numeric value."""
        if isinstance(level_name, int):
            return level_name

        level = logging.getLevelName(str(level_name).upper())
        return level if isinstance(level, int) else logging.INFO


# Singleton instance
log_manager = LogManager()


def initialize_logging(config: Optional[Dict[str, Any]] = None) -> LogManager:
    """
    Initialize logging from a configuration dictionary, or the defaults.

    Args:
        config: Optional logging configuration

    Returns:
        The shared LogManager
    """
    log_manager.initialize(config if config is not None else DEFAULT_LOGGING_CONFIG)
    return log_manager
