# slot_engine/infrastructure/config/validators/schema_validator.py
import json
import logging
import os
from typing import Any, Dict, List, Tuple

import jsonschema


SCHEMA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "schemas")
MACHINE_SCHEMA_PATH = os.path.join(SCHEMA_DIR, "machine.schema.json")


class SchemaValidator:
    """
    Validates configuration data against JSON schemas.
    Reports every violation, not only the first one found.
    """
    def __init__(self):
        self.logger = logging.getLogger("infrastructure.config.validator")

    def validate(self, config: Dict[str, Any], schema: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """
        Validate a configuration against a JSON schema.

        Returns:
            Tuple of (is_valid, error_messages)
        """
        try:
            validator_cls = jsonschema.validators.validator_for(schema)
            validator_cls.check_schema(schema)
        except jsonschema.exceptions.SchemaError as e:
            self.logger.error(f"Invalid schema: {e.message}")
            return False, [f"Schema error: {e.message}"]

        validator = validator_cls(schema)
        errors = []
        for error in sorted(validator.iter_errors(config), key=lambda e: [str(p) for p in e.path]):
            error_path = '.'.join(str(p) for p in error.path) if error.path else 'root'
            errors.append(f"At {error_path}: {error.message}")

        for message in errors:
            self.logger.error(f"Schema validation error: {message}")
        return not errors, errors

    def validate_machine(self, config: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """Validate a machine configuration against the bundled machine schema."""
        return self.validate(config, load_machine_schema())


def load_machine_schema() -> Dict[str, Any]:
    with open(MACHINE_SCHEMA_PATH, 'r', encoding='utf-8') as file:
        return json.load(file)
