# slot_engine/domain/machine/entities/spin_result.py
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple
import time

from .grid import Grid
from .line import Line


@dataclass(frozen=True)
class SpinResult:
    """
    Outcome of one evaluated grid.
    Handed to the host, which pays out `bet * total_multiplier` and drives
    any line rendering or animation from `lines`.
    """
    spin_number: int
    bet: float
    grid: Grid
    lines: Tuple[Line, ...] = ()
    tally: Mapping[str, int] = field(default_factory=dict)

    # Per-line payout plus the symbol bonus
    line_multiplier: float = 0.0
    bonus_multiplier: float = 0.0
    total_multiplier: float = 0.0

    timestamp: float = field(default_factory=time.time)

    def __post_init__(self):
        # Frozen dataclass: the tally is copied into a read-only view
        object.__setattr__(self, "tally", MappingProxyType(dict(self.tally)))

    @property
    def win(self) -> float:
        return self.bet * self.total_multiplier

    @property
    def is_win(self) -> bool:
        return self.total_multiplier > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary for logging or transport."""
        return {
            "spin_number": self.spin_number,
            "timestamp": self.timestamp,
            "bet": self.bet,
            "win": self.win,
            "grid": self.grid.names(),
            "lines": [line.to_dict() for line in self.lines],
            "tally": dict(self.tally),
            "line_multiplier": self.line_multiplier,
            "bonus_multiplier": self.bonus_multiplier,
            "total_multiplier": self.total_multiplier,
        }
