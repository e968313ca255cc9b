# slot_engine/infrastructure/config/loaders/yaml_loader.py
import os
import json
import logging
from typing import Any, Dict, List, Optional

import yaml


class ConfigError(Exception):
    """Base class for errors while loading or validating configuration files."""
    pass


class FileNotFoundConfigError(ConfigError):
    """Configuration file or directory does not exist."""
    def __init__(self, path, message=None):
        self.path = path
        self.message = message or f"Configuration file or directory not found: {path}"
        super().__init__(self.message)


class YamlParseError(ConfigError):
    """YAML file could not be parsed."""
    def __init__(self, file_path, yaml_error):
        self.file_path = file_path
        self.yaml_error = yaml_error
        self.message = f"Error parsing YAML file {file_path}: {yaml_error}"
        super().__init__(self.message)


class SchemaValidationError(ConfigError):
    """Configuration does not match its JSON schema."""
    def __init__(self, file_path, errors):
        self.file_path = file_path
        self.errors = errors
        error_msg = "\n  - ".join([""] + errors)
        self.message = f"Configuration validation failed for {file_path}:{error_msg}"
        super().__init__(self.message)


class YamlConfigLoader:
    """
    Loads machine configuration files from YAML, optionally validating them
    against a JSON schema.

    In strict mode (the default) a missing file, parse error or schema
    violation raises. Otherwise the loader logs a warning and falls back to
    the supplied default configuration where one is given.
    """
    def __init__(self, schema_validator=None):
        self.logger = logging.getLogger("infrastructure.config.loader")
        self.schema_validator = schema_validator
        self.strict_mode = True

    def set_strict_mode(self, strict: bool = True):
        self.strict_mode = strict
        return self

    def load_file(self, file_path: str, schema_path: Optional[str] = None,
                  default_config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Load a single YAML file.

        Args:
            file_path: Path to the YAML file
            schema_path: Optional path to a JSON schema to validate against
            default_config: Returned instead when the file is missing or broken
                and strict mode is off

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundConfigError: File does not exist (strict mode)
            YamlParseError: YAML could not be parsed (strict mode)
            SchemaValidationError: Validation failed (strict mode)
        """
        if not os.path.isfile(file_path):
            self.logger.error(f"Configuration file not found: {file_path}")

            if default_config is not None and not self.strict_mode:
                self.logger.warning(f"Using default configuration instead of missing file: {file_path}")
                return default_config

            raise FileNotFoundConfigError(file_path)

        try:
            with open(file_path, 'r', encoding='utf-8') as file:
                config = yaml.safe_load(file)
        except yaml.YAMLError as e:
            error = YamlParseError(file_path, e)
            self.logger.error(error.message)

            if default_config is not None and not self.strict_mode:
                self.logger.warning(f"Using default configuration due to parse error in {file_path}")
                return default_config

            raise error from e

        self.logger.debug(f"Loaded configuration from {file_path}")

        if config is None:
            self.logger.warning(f"Empty configuration file: {file_path}")
            config = default_config if default_config is not None else {}

        if schema_path and self.schema_validator:
            schema = self._load_schema(schema_path)
            is_valid, errors = self.schema_validator.validate(config, schema)

            if not is_valid:
                error = SchemaValidationError(file_path, errors)
                if self.strict_mode:
                    raise error
                self.logger.warning(f"{error.message}\nUsing unvalidated configuration.")
            else:
                self.logger.debug(f"Validated {file_path} against schema: {schema_path}")

        return config

    def load_directory(self, directory_path: str, schema_path: Optional[str] = None,
                       ignore_errors: bool = False) -> Dict[str, Dict[str, Any]]:
        """
        Load every .yaml/.yml file in a directory.

        Returns:
            Mapping of file stem to configuration dictionary
        """
        if not os.path.isdir(directory_path):
            self.logger.error(f"Configuration directory not found: {directory_path}")

            if not self.strict_mode:
                self.logger.warning(f"Returning empty configuration for missing directory: {directory_path}")
                return {}

            raise FileNotFoundConfigError(directory_path)

        yaml_files = sorted(f for f in os.listdir(directory_path)
                            if f.endswith('.yaml') or f.endswith('.yml'))

        if not yaml_files:
            self.logger.warning(f"No YAML files found in {directory_path}")
            return {}

        configs = {}
        errors = []

        for filename in yaml_files:
            file_path = os.path.join(directory_path, filename)
            config_name = os.path.splitext(filename)[0]

            try:
                configs[config_name] = self.load_file(file_path, schema_path)
            except ConfigError as e:
                errors.append(f"{filename}: {e}")
                if not ignore_errors and self.strict_mode:
                    raise

        if errors:
            self.logger.error(f"Errors occurred while loading files from {directory_path}:\n" +
                              "\n".join(f"  - {err}" for err in errors))

        failed_count = len(yaml_files) - len(configs)
        self.logger.info(
            f"Loaded {len(configs)} configuration files from {directory_path}" +
            (f" ({failed_count} failed)" if failed_count > 0 else "")
        )
        return configs

    def _load_schema(self, schema_path: str) -> Dict[str, Any]:
        if not os.path.isfile(schema_path):
            error_msg = f"Schema file not found: {schema_path}"
            self.logger.error(error_msg)
            raise FileNotFoundConfigError(schema_path, error_msg)

        try:
            with open(schema_path, 'r', encoding='utf-8') as file:
                return json.load(file)
        except json.JSONDecodeError as e:
            error_msg = f"Error parsing schema file {schema_path}: {e}"
            self.logger.error(error_msg)
            raise ConfigError(error_msg) from e

    def load_with_fallbacks(self, file_paths: List[str], schema_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Try each path in order and return the first configuration that loads.

        Raises:
            ConfigError: If every file fails and strict mode is on
        """
        errors = []
        original_strict_mode = self.strict_mode

        try:
            self.strict_mode = True

            for path in file_paths:
                try:
                    config = self.load_file(path, schema_path)
                    self.logger.info(f"Loaded configuration from {path}")
                    return config
                except ConfigError as e:
                    errors.append(f"{path}: {e}")

            error_msg = "All configuration files failed to load:\n" + "\n".join(f"  - {err}" for err in errors)
            self.logger.error(error_msg)

            if original_strict_mode:
                raise ConfigError(error_msg)

            self.logger.warning("Using empty configuration as fallback")
            return {}

        finally:
            self.strict_mode = original_strict_mode
