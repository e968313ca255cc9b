# slot_engine/domain/machine/entities/machine_config.py
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .symbol import SymbolCatalog
from ..errors import ConfigurationError
from ..services.payout_calculator import BonusTable, LineLengthTable


logger = logging.getLogger("domain.machine.config")


@dataclass(frozen=True)
class MachineConfig:
    """
    Everything a machine needs to draw and score a grid.

    The line factor table must cover every run length the grid can produce:
    `height` for vertical lines (when the grid has at least two rows) and each
    length from `min_run` to `width` for horizontal lines. A length that should not pay has to be listed with a
    factor of 0.
    """
    catalog: SymbolCatalog
    width: int = 5
    height: int = 3
    line_table: Optional[LineLengthTable] = None
    bonus_table: Optional[BonusTable] = None
    min_run: int = 3
    big_win_multiplier: Optional[float] = 10.0
    rng_strategy: str = "mersenne"
    rng_seed: Optional[int] = None

    def __post_init__(self):
        # Frozen dataclass: defaults for the tables are filled in via object.__setattr__
        if self.line_table is None:
            object.__setattr__(self, "line_table", LineLengthTable())
        if self.bonus_table is None:
            object.__setattr__(self, "bonus_table", BonusTable())
        self.validate()

    def validate(self):
        """
        Raises:
            ConfigurationError: On bad dimensions or an incomplete line table
        """
        if self.width <= 0 or self.height <= 0:
            self._fail(f"Grid dimensions must be positive, got {self.width}x{self.height}")
        if self.min_run <= 0:
            self._fail(f"min_run must be positive, got {self.min_run}")
        if self.catalog is None or len(self.catalog) == 0:
            self._fail("Symbol catalog must not be empty")
        if self.big_win_multiplier is not None and not (
                math.isfinite(self.big_win_multiplier) and self.big_win_multiplier >= 0):
            self._fail(f"big_win_multiplier must be finite and not negative, got {self.big_win_multiplier}")

        # Single-row grids have no vertical lines
        required = set(range(self.min_run, self.width + 1))
        if self.height >= 2:
            required.add(self.height)
        missing = sorted(length for length in required if not self.line_table.covers(length))
        if missing:
            self._fail(
                f"Line factor table has no entry for run lengths {missing} "
                f"(grid {self.width}x{self.height}, min_run {self.min_run})"
            )

    @staticmethod
    def _fail(message: str):
        logger.error(message)
        raise ConfigurationError(message)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'MachineConfig':
        """
        Build a config from a raw dictionary, e.g. a parsed YAML file.

        Example:
            {"width": 5, "height": 3,
             "symbols": [{"name": "cherry", "multiplier": 0.5}, ...],
             "line_factors": [{"length": 3, "factor": 0.2}, ...],
             "bonus_table": [{"min_count": 0, "rate": 0}, ...],
             "rng": {"strategy": "mersenne", "seed": 42}}
        """
        if not isinstance(config, dict):
            raise ConfigurationError(f"Machine configuration must be a mapping, got {type(config).__name__}")

        rng_config = config.get("rng") or {}
        if not isinstance(rng_config, dict):
            raise ConfigurationError(f"rng must be a mapping, got {type(rng_config).__name__}")
        try:
            return cls(
                catalog=SymbolCatalog.from_config(config.get("symbols", [])),
                width=int(config.get("width", 5)),
                height=int(config.get("height", 3)),
                line_table=LineLengthTable.from_config(config.get("line_factors")),
                bonus_table=BonusTable.from_config(config.get("bonus_table")),
                min_run=int(config.get("min_run", 3)),
                big_win_multiplier=config.get("big_win_multiplier", 10.0),
                rng_strategy=rng_config.get("strategy", "mersenne"),
                rng_seed=rng_config.get("seed"),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid machine configuration: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "min_run": self.min_run,
            "big_win_multiplier": self.big_win_multiplier,
            "symbols": [{"name": s.name, "multiplier": s.multiplier} for s in self.catalog],
            "line_factors": [{"length": length, "factor": factor}
                             for length, factor in self.line_table.to_dict().items()],
            "bonus_table": [{"min_count": count, "rate": rate}
                            for count, rate in self.bonus_table.tiers],
            "rng": {"strategy": self.rng_strategy, "seed": self.rng_seed},
        }
