# slot_engine/domain/machine/errors.py


class SlotEngineError(Exception):
    """Base class for errors raised by the slot payout engine."""
    pass


class ConfigurationError(SlotEngineError):
    """Machine configuration is invalid or does not cover a required case."""
    pass


class ConcurrentSpinError(SlotEngineError):
    """A spin was requested while another evaluation is still in progress."""
    def __init__(self, machine_id, message=None):
        self.machine_id = machine_id
        self.message = message or f"Machine {machine_id} is already evaluating a spin"
        super().__init__(self.message)


class UnknownSymbolError(SlotEngineError):
    """A grid cell references a symbol that is not in the catalog."""
    def __init__(self, name, message=None):
        self.name = name
        self.message = message or f"Unknown symbol: {name!r}"
        super().__init__(self.message)
