# slot_engine/domain/machine/factories/machine_factory.py
import logging
import os
from typing import Any, Dict, Optional

from ..entities.machine_config import MachineConfig
from ..entities.slot_machine import SlotMachine
from ..errors import SlotEngineError
from slot_engine.infrastructure.config.loaders.yaml_loader import YamlConfigLoader
from slot_engine.infrastructure.config.validators.schema_validator import SchemaValidator


DEFAULT_MACHINE_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))),
    "application", "config", "machines", "classic_5x3.yaml"
)


class MachineFactory:
    """
    Factory for creating SlotMachine instances from raw configuration.
    """
    def __init__(self, rng_provider=None, event_dispatcher=None):
        """
        Args:
            rng_provider: Optional RNGProvider used to give each machine its RNG
            event_dispatcher: Optional dispatcher passed to every machine
        """
        self.logger = logging.getLogger("domain.machine.factory")
        self.rng_provider = rng_provider
        self.event_dispatcher = event_dispatcher

    def create_machine(self, machine_id: str, config: Dict[str, Any],
                       rng_strategy_name: Optional[str] = None) -> SlotMachine:
        """
        Create a machine from a configuration dictionary.

        Args:
            machine_id: Unique identifier for the machine
            config: Raw machine configuration (see MachineConfig.from_dict)
            rng_strategy_name: Overrides the strategy named in the config

        Returns:
            Initialized SlotMachine

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.logger.info(f"Creating slot machine: {machine_id}")

        machine_config = MachineConfig.from_dict(config)

        rng_strategy = None
        if self.rng_provider:
            strategy_name = rng_strategy_name or machine_config.rng_strategy
            # Machines never share an RNG instance, seeded or not
            rng_strategy = self.rng_provider.get_rng(strategy_name, machine_config.rng_seed, shared=False)
            self.logger.debug(f"Using RNG strategy: {strategy_name}, seed: {machine_config.rng_seed}")
        else:
            self.logger.warning("No RNG provider available, machine will need RNG set later")

        return SlotMachine(machine_id, machine_config, rng_strategy, self.event_dispatcher)

    def create_machine_from_file(self, config_loader, file_path: str,
                                 machine_id: Optional[str] = None) -> SlotMachine:
        """
        Create a machine from a YAML file.
        The id comes from the argument, else the file's machine_id key, else
        the file name without extension.
        """
        self.logger.info(f"Creating machine from file: {file_path}")

        config = config_loader.load_file(file_path)

        if machine_id is None:
            machine_id = config.get("machine_id") or os.path.splitext(os.path.basename(file_path))[0]

        return self.create_machine(machine_id, config)

    def create_multiple_machines(self, config_loader, config_dir: str) -> Dict[str, SlotMachine]:
        """
        Create one machine per YAML file in a directory.
        Files that fail to produce a machine are logged and skipped.
        """
        self.logger.info(f"Creating machines from directory: {config_dir}")

        configs = config_loader.load_directory(config_dir)

        machines = {}
        for config_id, config in configs.items():
            machine_id = config.get("machine_id", config_id)

            try:
                machines[machine_id] = self.create_machine(machine_id, config)
            except SlotEngineError as e:
                self.logger.error(f"Failed to create machine {machine_id}: {e}")

        self.logger.info(f"Created {len(machines)} machines")
        return machines

    def create_default_machine(self, config_loader=None, machine_id: Optional[str] = None) -> SlotMachine:
        """
        Create the bundled classic 5x3 machine.
        Without a loader the file is read by a schema-validating YamlConfigLoader.
        """
        if config_loader is None:
            config_loader = YamlConfigLoader(SchemaValidator())
        return self.create_machine_from_file(config_loader, DEFAULT_MACHINE_PATH, machine_id)
