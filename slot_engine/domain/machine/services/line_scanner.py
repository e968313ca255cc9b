# slot_engine/domain/machine/services/line_scanner.py
import logging
from typing import List

from ..entities.grid import Cell, Grid
from ..entities.line import Line, Orientation
from ..entities.symbol import Symbol, SymbolCatalog
from ..errors import UnknownSymbolError


class LineScanner:
    """
    Finds winning lines in a completed grid.

    Two independent passes run over the same grid:
    - vertical: a column wins only when every row holds the same symbol
    - horizontal: each maximal run of `min_run` or more identical symbols in
      a row wins once, over its full length
    A cell can therefore belong to at most one vertical and one horizontal line.
    """
    def __init__(self, catalog: SymbolCatalog, min_run: int = 3):
        self._catalog = catalog
        self._min_run = min_run
        self.logger = logging.getLogger("domain.machine.scanner")

    @property
    def min_run(self) -> int:
        return self._min_run

    def scan(self, grid: Grid) -> List[Line]:
        """
        Scan the grid for all winning lines.

        Returns:
            Vertical lines in column order followed by horizontal lines in
            row order, then by start column

        Raises:
            UnknownSymbolError: If a cell holds a symbol the catalog does not know
        """
        self._check_symbols(grid)

        lines = self.scan_vertical(grid) + self.scan_horizontal(grid)
        self.logger.debug(f"Scan found {len(lines)} lines")
        return lines

    def scan_vertical(self, grid: Grid) -> List[Line]:
        """Full-column matches. A single-row grid has no vertical lines."""
        lines = []
        if grid.height < 2:
            return lines
        bottom = grid.height - 1

        for x in range(grid.width):
            column = grid.column(x)
            first = column[0]
            if all(symbol == first for symbol in column[1:]):
                lines.append(Line(
                    symbol=first,
                    orientation=Orientation.VERTICAL,
                    start=Cell(x, 0),
                    end=Cell(x, bottom),
                    run_length=grid.height,
                ))
        return lines

    def scan_horizontal(self, grid: Grid) -> List[Line]:
        lines = []

        for y in range(grid.height):
            row = grid.row(y)
            run_symbol = row[0]
            run_start = 0

            # A run closes when the symbol changes or the row ends
            for x in range(1, grid.width + 1):
                if x < grid.width and row[x] == run_symbol:
                    continue

                run_length = x - run_start
                if run_length >= self._min_run:
                    lines.append(Line(
                        symbol=run_symbol,
                        orientation=Orientation.HORIZONTAL,
                        start=Cell(run_start, y),
                        end=Cell(x - 1, y),
                        run_length=run_length,
                    ))

                if x < grid.width:
                    run_symbol = row[x]
                    run_start = x
        return lines

    def _check_symbols(self, grid: Grid):
        for y, row in enumerate(grid.rows):
            for x, symbol in enumerate(row):
                if not self._is_known(symbol):
                    self.logger.error(f"Cell ({x}, {y}) holds unknown symbol {symbol!r}")
                    raise UnknownSymbolError(getattr(symbol, "name", symbol))

    def _is_known(self, symbol: Symbol) -> bool:
        name = getattr(symbol, "name", None)
        return name in self._catalog and self._catalog.resolve(name) == symbol
