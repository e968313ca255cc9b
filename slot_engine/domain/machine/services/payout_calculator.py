# slot_engine/domain/machine/services/payout_calculator.py
import bisect
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..entities.line import Line
from ..errors import ConfigurationError


DEFAULT_LINE_FACTORS = {3: 0.2, 4: 0.4, 5: 0.8}

# (min_count, rate): a tally of min_count or more matched cells earns rate per cell
DEFAULT_BONUS_TIERS = [
    (0, 0.0),
    (5, 0.2),
    (6, 0.25),
    (7, 0.35),
    (8, 0.6),
    (9, 2.0),
    (10, 3.0),
    (11, 4.5),
    (12, 6.0),
    (13, 7.5),
    (14, 13.0),
    (15, 15.0),
    (16, 25.0),
    (17, 30.0),
    (18, 40.0),
    (19, 50.0),
    (20, 70.0),
    (21, 150.0),
    (22, 750.0),
    (23, 1000.0),
]


class LineLengthTable:
    """
    Step function from run length to the factor applied to a symbol's base
    multiplier. Only tabulated lengths pay; asking for any other length is a
    configuration error rather than a silent zero.
    """
    def __init__(self, factors: Optional[Mapping[int, float]] = None):
        factors = DEFAULT_LINE_FACTORS if factors is None else factors
        self._factors = {}
        for length, factor in factors.items():
            length, factor = int(length), float(factor)
            if length <= 0:
                raise ConfigurationError(f"Line length must be positive, got {length}")
            if not math.isfinite(factor) or factor < 0:
                raise ConfigurationError(
                    f"Line factor for length {length} must be finite and not negative: {factor}"
                )
            self._factors[length] = factor

    @classmethod
    def from_config(cls, entries: Optional[List[Dict[str, Any]]]) -> 'LineLengthTable':
        """Build from [{"length": 3, "factor": 0.2}, ...]; None means defaults."""
        if entries is None:
            return cls()
        factors = {}
        for i, entry in enumerate(entries):
            if not isinstance(entry, dict) or 'length' not in entry or 'factor' not in entry:
                raise ConfigurationError(f"Invalid line factor entry at index {i}: {entry}")
            if int(entry['length']) in factors:
                raise ConfigurationError(f"Duplicate line length in table: {entry['length']}")
            factors[int(entry['length'])] = entry['factor']
        return cls(factors)

    def factor(self, run_length: int) -> float:
        try:
            return self._factors[run_length]
        except KeyError:
            raise ConfigurationError(
                f"No line factor configured for run length {run_length}"
            ) from None

    def covers(self, run_length: int) -> bool:
        return run_length in self._factors

    @property
    def lengths(self) -> List[int]:
        return sorted(self._factors)

    def to_dict(self) -> Dict[int, float]:
        return dict(sorted(self._factors.items()))


class BonusTable:
    """
    Tiered rate paid per matched cell for a symbol's tally in one spin.
    Tiers are (min_count, rate) pairs with strictly increasing min_count and
    non-decreasing rates; the highest tier whose min_count does not exceed
    the tally applies.
    """
    def __init__(self, tiers: Optional[Iterable[Tuple[int, float]]] = None):
        tiers = [(int(c), float(r)) for c, r in (DEFAULT_BONUS_TIERS if tiers is None else tiers)]
        if not tiers:
            raise ConfigurationError("Bonus table must contain at least one tier")
        for count, rate in tiers:
            if not math.isfinite(rate):
                raise ConfigurationError(f"Bonus rate for tier {count} is not finite: {rate}")

        for (prev_count, prev_rate), (count, rate) in zip(tiers, tiers[1:]):
            if count <= prev_count:
                raise ConfigurationError(
                    f"Bonus tiers must be strictly increasing, got {prev_count} then {count}"
                )
            if rate < prev_rate:
                raise ConfigurationError(
                    f"Bonus rate decreases from {prev_rate} to {rate} at tier {count}"
                )
        if tiers[0][1] < 0:
            raise ConfigurationError(f"Bonus rate must not be negative: {tiers[0][1]}")

        self._thresholds = [count for count, _ in tiers]
        self._rates = [rate for _, rate in tiers]

    @classmethod
    def from_config(cls, entries: Optional[List[Dict[str, Any]]]) -> 'BonusTable':
        """Build from [{"min_count": 5, "rate": 0.2}, ...]; None means defaults."""
        if entries is None:
            return cls()
        tiers = []
        for i, entry in enumerate(entries):
            if not isinstance(entry, dict) or 'min_count' not in entry or 'rate' not in entry:
                raise ConfigurationError(f"Invalid bonus tier at index {i}: {entry}")
            tiers.append((entry['min_count'], entry['rate']))
        return cls(tiers)

    def rate(self, count: int) -> float:
        index = bisect.bisect_right(self._thresholds, count) - 1
        if index < 0:
            raise ConfigurationError(
                f"No bonus tier covers a tally of {count} (lowest tier starts at {self._thresholds[0]})"
            )
        return self._rates[index]

    @property
    def tiers(self) -> List[Tuple[int, float]]:
        return list(zip(self._thresholds, self._rates))


@dataclass(frozen=True)
class PayoutBreakdown:
    line: float
    bonus: float

    @property
    def total(self) -> float:
        return self.line + self.bonus


class PayoutCalculator:
    """
    Turns the lines and symbol tally of one grid into a total multiplier.

    total = sum(symbol multiplier * line factor(run length)) over lines
          + sum(tally count * bonus rate(tally count)) over symbols

    Lines of the same symbol always add; the tally only feeds the bonus term.
    """
    def __init__(self, line_table: Optional[LineLengthTable] = None,
                 bonus_table: Optional[BonusTable] = None):
        self.line_table = line_table or LineLengthTable()
        self.bonus_table = bonus_table or BonusTable()
        self.logger = logging.getLogger("domain.machine.payout")

    def line_payout(self, lines: Iterable[Line]) -> float:
        total = 0.0
        for line in lines:
            total += line.symbol.multiplier * self.line_table.factor(line.run_length)
        return total

    def bonus_payout(self, tally: Mapping[str, int]) -> float:
        total = 0.0
        for name, count in tally.items():
            bonus = count * self.bonus_table.rate(count)
            if bonus > 0:
                self.logger.debug(f"Bonus for {name}: {count} cells -> {bonus}")
            total += bonus
        return total

    def breakdown(self, lines: Iterable[Line], tally: Mapping[str, int]) -> PayoutBreakdown:
        return PayoutBreakdown(line=self.line_payout(lines), bonus=self.bonus_payout(tally))

    def calculate(self, lines: Iterable[Line], tally: Mapping[str, int]) -> float:
        """Return the total multiplier for one grid (0.0 when there are no lines)."""
        return self.breakdown(lines, tally).total
