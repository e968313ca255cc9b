# slot_engine/__init__.py
"""
Slot payout engine

Draws a symbol grid, detects vertical (full column) and horizontal (run of
three or more) winning lines, and prices them as a total multiplier:
- per-line base payout: symbol multiplier * line length factor
- symbol frequency bonus: matched cells * tiered bonus rate
"""

from .domain.machine.errors import (
    SlotEngineError,
    ConfigurationError,
    ConcurrentSpinError,
    UnknownSymbolError,
)
from .domain.machine.entities.symbol import Symbol, SymbolCatalog
from .domain.machine.entities.grid import Cell, Grid
from .domain.machine.entities.line import Line, Orientation
from .domain.machine.entities.spin_result import SpinResult
from .domain.machine.entities.machine_config import MachineConfig
from .domain.machine.entities.slot_machine import MachineState, SlotMachine
from .domain.machine.factories.machine_factory import MachineFactory

__all__ = [
    'SlotEngineError',
    'ConfigurationError',
    'ConcurrentSpinError',
    'UnknownSymbolError',
    'Symbol',
    'SymbolCatalog',
    'Cell',
    'Grid',
    'Line',
    'Orientation',
    'SpinResult',
    'MachineConfig',
    'MachineState',
    'SlotMachine',
    'MachineFactory',
]

__version__ = "0.1.0"
