# slot_engine/domain/machine/services/match_aggregator.py
from collections import defaultdict
from typing import Dict, Iterable

from ..entities.line import Line


class MatchAggregator:
    """Totals matched cells per symbol across every line found in one grid."""

    @staticmethod
    def aggregate(lines: Iterable[Line]) -> Dict[str, int]:
        """
        Sum the run lengths of all lines per symbol name.
        Vertical and horizontal lines of the same symbol add into one tally.
        """
        tally = defaultdict(int)
        for line in lines:
            tally[line.symbol.name] += line.run_length
        return dict(tally)
