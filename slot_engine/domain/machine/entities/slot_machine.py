# slot_engine/domain/machine/entities/slot_machine.py
import logging
import threading
from enum import Enum
from typing import Any, Dict, Optional

from .grid import Grid
from .machine_config import MachineConfig
from .spin_result import SpinResult
from ..errors import ConcurrentSpinError, ConfigurationError
from ..services.grid_generator import GridGenerator
from ..services.line_scanner import LineScanner
from ..services.match_aggregator import MatchAggregator
from ..services.payout_calculator import PayoutCalculator
from ...events.spin_events import SpinEvent, SpinEventType


class MachineState(Enum):
    IDLE = "idle"
    EVALUATING = "evaluating"


class SlotMachine:
    """
    The spin engine: draws a grid, finds winning lines and prices them.

    A machine evaluates one spin at a time. Calling spin() while an evaluation
    is in flight (from another thread, or re-entrantly from inside the RNG)
    raises ConcurrentSpinError and leaves the running evaluation untouched.
    Separate machines may share a SymbolCatalog but each needs its own RNG.
    """
    def __init__(self, machine_id: str, config: MachineConfig, rng_strategy=None,
                 event_dispatcher=None):
        """
        Initialize the slot machine.

        Args:
            machine_id: Unique identifier for this machine
            config: Validated machine configuration
            rng_strategy: RNG strategy used to draw grids (can be set later)
            event_dispatcher: Optional dispatcher notified after every spin
        """
        self.id = machine_id
        self.logger = logging.getLogger(f"domain.machine.{machine_id}")
        self.logger.info(f"Initializing slot machine: {machine_id}")

        self.config = config
        self.rng = rng_strategy
        self.event_dispatcher = event_dispatcher

        self._generator = GridGenerator()
        self._scanner = LineScanner(config.catalog, config.min_run)
        self._aggregator = MatchAggregator()
        self._calculator = PayoutCalculator(config.line_table, config.bonus_table)

        self._lock = threading.Lock()
        self._state = MachineState.IDLE
        self._spin_count = 0

        self.logger.info(
            f"Slot machine {machine_id} initialized: {config.width}x{config.height}, "
            f"{len(config.catalog)} symbols"
        )

    @property
    def state(self) -> MachineState:
        return self._state

    @property
    def spin_count(self) -> int:
        return self._spin_count

    @property
    def catalog(self):
        return self.config.catalog

    @property
    def calculator(self) -> PayoutCalculator:
        return self._calculator

    def set_rng(self, rng_strategy):
        self.rng = rng_strategy
        self.logger.debug(f"Updated RNG strategy: {type(rng_strategy).__name__}")

    def spin(self, bet: float) -> SpinResult:
        """
        Draw a new grid and evaluate it.

        Args:
            bet: Wager for this spin; the host pays out bet * total_multiplier

        Returns:
            SpinResult for the drawn grid

        Raises:
            ValueError: If bet is negative
            ConfigurationError: If no RNG strategy is set
            ConcurrentSpinError: If another spin is still being evaluated
        """
        self._check_bet(bet)
        if self.rng is None:
            self.logger.error("No RNG strategy set, cannot spin")
            raise ConfigurationError(f"No RNG strategy set for slot machine {self.id}")

        with self._evaluating():
            grid = self._generator.generate(
                self.config.width, self.config.height, self.config.catalog, self.rng
            )
            result = self._score(grid, bet)

        self._publish(result)
        return result

    def evaluate(self, grid: Grid, bet: float = 0.0) -> SpinResult:
        """
        Score an externally supplied grid, e.g. a replayed or fixture grid.

        Raises:
            ValueError: If bet is negative
            UnknownSymbolError: If the grid holds a symbol outside the catalog
            ConcurrentSpinError: If another spin is still being evaluated
        """
        self._check_bet(bet)

        with self._evaluating():
            result = self._score(grid, bet)

        self._publish(result)
        return result

    def _score(self, grid: Grid, bet: float) -> SpinResult:
        lines = self._scanner.scan(grid)
        tally = self._aggregator.aggregate(lines)
        payout = self._calculator.breakdown(lines, tally)

        self._spin_count += 1
        result = SpinResult(
            spin_number=self._spin_count,
            bet=bet,
            grid=grid,
            lines=tuple(lines),
            tally=tally,
            line_multiplier=payout.line,
            bonus_multiplier=payout.bonus,
            total_multiplier=payout.total,
        )

        self.logger.debug(
            f"Spin {result.spin_number}: {len(lines)} lines, tally={tally}, "
            f"multiplier={result.total_multiplier} (lines {payout.line}, bonus {payout.bonus})"
        )
        return result

    def _evaluating(self):
        return _EvaluationGuard(self)

    def _check_bet(self, bet: float):
        if bet < 0:
            error_msg = f"Bet must not be negative: {bet}"
            self.logger.error(error_msg)
            raise ValueError(error_msg)

    def _publish(self, result: SpinResult):
        if self.event_dispatcher is None:
            return

        self.event_dispatcher.dispatch(SpinEvent(
            type=SpinEventType.SPIN_COMPLETED, machine_id=self.id, result=result
        ))

        threshold = self.config.big_win_multiplier
        if threshold is not None and result.is_win and result.total_multiplier >= threshold:
            self.logger.info(f"Big win on spin {result.spin_number}: x{result.total_multiplier}")
            self.event_dispatcher.dispatch(SpinEvent(
                type=SpinEventType.BIG_WIN, machine_id=self.id, result=result
            ))

    def get_info(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'state': self._state.value,
            'spin_count': self._spin_count,
            'width': self.config.width,
            'height': self.config.height,
            'symbols': self.config.catalog.names,
            'line_factors': self.config.line_table.to_dict(),
            'bonus_tiers': len(self.config.bonus_table.tiers),
            'rng': type(self.rng).__name__ if self.rng is not None else None,
        }


class _EvaluationGuard:
    """Moves a machine IDLE -> EVALUATING -> IDLE, rejecting overlapping spins."""

    def __init__(self, machine: SlotMachine):
        self._machine = machine

    def __enter__(self):
        machine = self._machine
        if not machine._lock.acquire(blocking=False):
            machine.logger.warning("Spin rejected: an evaluation is already in progress")
            raise ConcurrentSpinError(machine.id)
        machine._state = MachineState.EVALUATING
        return machine

    def __exit__(self, exc_type, exc, tb):
        machine = self._machine
        machine._state = MachineState.IDLE
        machine._lock.release()
        return False
