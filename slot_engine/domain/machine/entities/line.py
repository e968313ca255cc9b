# slot_engine/domain/machine/entities/line.py
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator

from .grid import Cell
from .symbol import Symbol


class Orientation(Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


@dataclass(frozen=True)
class Line:
    """
    A winning run of identical symbols.
    Vertical lines always span a full column; horizontal lines cover one
    maximal run of three or more cells within a row.
    """
    symbol: Symbol
    orientation: Orientation
    start: Cell
    end: Cell
    run_length: int

    def cells(self) -> Iterator[Cell]:
        """Iterate the cells covered by this line, from start to end."""
        if self.orientation is Orientation.VERTICAL:
            for y in range(self.start.y, self.end.y + 1):
                yield Cell(self.start.x, y)
        else:
            for x in range(self.start.x, self.end.x + 1):
                yield Cell(x, self.start.y)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol.name,
            "orientation": self.orientation.value,
            "start": list(self.start),
            "end": list(self.end),
            "run_length": self.run_length,
        }
