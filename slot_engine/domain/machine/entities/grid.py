# slot_engine/domain/machine/entities/grid.py
from dataclasses import dataclass
from typing import List, NamedTuple, Sequence, Tuple

from .symbol import Symbol, SymbolCatalog
from ..errors import ConfigurationError


class Cell(NamedTuple):
    """Grid coordinate. x is the column, y the row (row 0 is the top row)."""
    x: int
    y: int


@dataclass(frozen=True)
class Grid:
    """
    Snapshot of the symbols drawn for one spin.
    Rows are stored top to bottom, each row left to right.
    """
    rows: Tuple[Tuple[Symbol, ...], ...]

    def __post_init__(self):
        if not self.rows or not self.rows[0]:
            raise ConfigurationError("Grid must have at least one row and one column")
        width = len(self.rows[0])
        for y, row in enumerate(self.rows):
            if len(row) != width:
                raise ConfigurationError(
                    f"Grid row {y} has {len(row)} cells, expected {width}"
                )

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Symbol]]) -> 'Grid':
        return cls(tuple(tuple(row) for row in rows))

    @classmethod
    def from_names(cls, rows: Sequence[Sequence[str]], catalog: SymbolCatalog) -> 'Grid':
        """
        Build a grid from symbol names, e.g. a test fixture.

        Raises:
            UnknownSymbolError: If a name is not in the catalog
        """
        return cls(tuple(tuple(catalog.resolve(name) for name in row) for row in rows))

    @property
    def width(self) -> int:
        return len(self.rows[0])

    @property
    def height(self) -> int:
        return len(self.rows)

    def cell(self, x: int, y: int) -> Symbol:
        return self.rows[y][x]

    def row(self, y: int) -> Tuple[Symbol, ...]:
        return self.rows[y]

    def column(self, x: int) -> Tuple[Symbol, ...]:
        return tuple(row[x] for row in self.rows)

    def names(self) -> List[List[str]]:
        return [[symbol.name for symbol in row] for row in self.rows]

    def __str__(self) -> str:
        return "\n".join(" ".join(row) for row in self.names())
