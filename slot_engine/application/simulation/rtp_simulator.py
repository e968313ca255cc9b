# slot_engine/application/simulation/rtp_simulator.py
import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict

import numpy as np

from slot_engine.domain.machine.entities.slot_machine import SlotMachine


@dataclass
class SimulationSummary:
    """Aggregate statistics over a batch of spins on one machine."""
    machine_id: str
    total_spins: int = 0
    bet: float = 0.0
    total_bet: float = 0.0
    total_win: float = 0.0
    return_to_player: float = 0.0
    hit_rate: float = 0.0
    mean_multiplier: float = 0.0
    std_multiplier: float = 0.0
    max_multiplier: float = 0.0
    line_multiplier_share: float = 0.0  # fraction of total multiplier paid by the per-line payout
    big_win_count: int = 0
    duration: float = 0.0

    symbol_line_counts: Dict[str, int] = field(default_factory=dict)
    lines_per_spin: Dict[int, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {attr: getattr(self, attr) for attr in self.__dataclass_fields__}


class RTPSimulator:
    """
    Runs a machine for many spins and summarises its payout behaviour.

    Spins run sequentially on the one machine, so the machine's single
    evaluation at a time rule is respected. Use a seeded RNG on the machine
    for reproducible figures.
    """
    def __init__(self, machine: SlotMachine):
        self.machine = machine
        self.logger = logging.getLogger("application.simulation.rtp")

    def run(self, num_spins: int, bet: float = 1.0, progress_every: int = 0) -> SimulationSummary:
        """
        Spin the machine num_spins times.

        Args:
            num_spins: Number of spins to run
            bet: Wager per spin
            progress_every: Log progress every N spins (0 disables)

        Returns:
            SimulationSummary

        Raises:
            ValueError: If num_spins is not positive or bet is negative
        """
        if num_spins <= 0:
            raise ValueError(f"num_spins must be positive, got {num_spins}")
        if bet < 0:
            raise ValueError(f"Bet must not be negative: {bet}")

        self.logger.info(f"Simulating {num_spins} spins on {self.machine.id} at bet {bet}")
        start = time.time()

        multipliers = np.zeros(num_spins, dtype=np.float64)
        line_parts = np.zeros(num_spins, dtype=np.float64)
        line_counts = np.zeros(num_spins, dtype=np.int64)
        symbol_lines = Counter()

        for i in range(num_spins):
            result = self.machine.spin(bet)
            multipliers[i] = result.total_multiplier
            line_parts[i] = result.line_multiplier
            line_counts[i] = len(result.lines)
            symbol_lines.update(line.symbol.name for line in result.lines)

            if progress_every and (i + 1) % progress_every == 0:
                self.logger.info(f"  Progress: {i + 1}/{num_spins} spins, "
                                 f"running RTP {multipliers[:i + 1].mean():.4f}")

        summary = self._summarize(multipliers, line_parts, line_counts, symbol_lines, bet)
        summary.duration = time.time() - start

        self.logger.info(
            f"Simulation finished in {summary.duration:.2f}s: RTP={summary.return_to_player:.4f}, "
            f"hit rate={summary.hit_rate:.4f}, max x{summary.max_multiplier}"
        )
        return summary

    def _summarize(self, multipliers: np.ndarray, line_parts: np.ndarray, line_counts: np.ndarray,
                   symbol_lines: Counter, bet: float) -> SimulationSummary:
        num_spins = len(multipliers)
        total_multiplier = float(multipliers.sum())
        big_win = self.machine.config.big_win_multiplier
        big_wins = (multipliers > 0) & (multipliers >= big_win) if big_win is not None else None

        lengths, occurrences = np.unique(line_counts, return_counts=True)

        return SimulationSummary(
            machine_id=self.machine.id,
            total_spins=num_spins,
            bet=bet,
            total_bet=bet * num_spins,
            total_win=bet * total_multiplier,
            return_to_player=total_multiplier / num_spins,
            hit_rate=float(np.count_nonzero(multipliers)) / num_spins,
            mean_multiplier=float(multipliers.mean()),
            std_multiplier=float(multipliers.std()),
            max_multiplier=float(multipliers.max()),
            line_multiplier_share=float(line_parts.sum()) / total_multiplier if total_multiplier > 0 else 0.0,
            big_win_count=int(np.count_nonzero(big_wins)) if big_wins is not None else 0,
            symbol_line_counts=dict(symbol_lines),
            lines_per_spin={int(k): int(v) for k, v in zip(lengths, occurrences)},
        )
