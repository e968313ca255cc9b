# tests/test_line_scanner.py
import unittest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from slot_engine.domain.machine.entities.grid import Cell, Grid
from slot_engine.domain.machine.entities.line import Orientation
from slot_engine.domain.machine.entities.symbol import Symbol, SymbolCatalog
from slot_engine.domain.machine.errors import UnknownSymbolError
from slot_engine.domain.machine.services.line_scanner import LineScanner


class TestLineScanner(unittest.TestCase):
    """Test cases for vertical and horizontal line detection."""

    def setUp(self):
        self.catalog = SymbolCatalog.from_config([
            {"name": "A", "multiplier": 1.0},
            {"name": "B", "multiplier": 2.0},
            {"name": "C", "multiplier": 0.5},
            {"name": "D", "multiplier": 0.25},
        ])
        self.scanner = LineScanner(self.catalog)

    def grid(self, *rows):
        return Grid.from_names([row.split() for row in rows], self.catalog)

    def test_no_lines(self):
        """Grid without runs or full columns yields nothing."""
        grid = self.grid(
            "A B C D A",
            "A C D A B",
            "B D A B C",
        )
        self.assertEqual(self.scanner.scan(grid), [])

    def test_single_horizontal_run(self):
        grid = self.grid(
            "A A A B B",
            "C D C D C",
            "D C D C D",
        )
        lines = self.scanner.scan(grid)

        self.assertEqual(len(lines), 1)
        line = lines[0]
        self.assertEqual(line.symbol.name, "A")
        self.assertEqual(line.orientation, Orientation.HORIZONTAL)
        self.assertEqual(line.start, Cell(0, 0))
        self.assertEqual(line.end, Cell(2, 0))
        self.assertEqual(line.run_length, 3)

    def test_run_is_counted_once_at_full_length(self):
        """[A,A,A,A,B] is one line of four, not a three plus a four."""
        grid = self.grid(
            "A A A A B",
            "C D C D C",
            "D C D C D",
        )
        lines = self.scanner.scan(grid)

        self.assertEqual(len(lines), 1)
        self.assertEqual(lines[0].run_length, 4)
        self.assertEqual(lines[0].end, Cell(3, 0))

    def test_run_ending_at_row_end(self):
        grid = self.grid(
            "C D B B B",
            "C D C D C",
            "D C D C D",
        )
        lines = self.scanner.scan(grid)

        self.assertEqual(len(lines), 1)
        self.assertEqual(lines[0].symbol.name, "B")
        self.assertEqual(lines[0].start, Cell(2, 0))
        self.assertEqual(lines[0].end, Cell(4, 0))

    def test_full_row_is_single_line(self):
        grid = self.grid(
            "B B B B B",
            "C D C D C",
            "D C D C D",
        )
        lines = self.scanner.scan_horizontal(grid)

        self.assertEqual(len(lines), 1)
        self.assertEqual(lines[0].run_length, 5)

    def test_two_runs_in_one_row(self):
        grid = self.grid("A A A B B B B")
        lines = self.scanner.scan_horizontal(grid)

        self.assertEqual([(l.symbol.name, l.start.x, l.end.x, l.run_length) for l in lines],
                         [("A", 0, 2, 3), ("B", 3, 6, 4)])

    def test_pairs_do_not_win(self):
        grid = self.grid("A A B B A A")
        self.assertEqual(self.scanner.scan_horizontal(grid), [])

    def test_full_column_match(self):
        grid = self.grid(
            "A B C D B",
            "A C D B C",
            "A D B C D",
        )
        lines = self.scanner.scan(grid)

        self.assertEqual(len(lines), 1)
        line = lines[0]
        self.assertEqual(line.orientation, Orientation.VERTICAL)
        self.assertEqual(line.start, Cell(0, 0))
        self.assertEqual(line.end, Cell(0, 2))
        self.assertEqual(line.run_length, 3)

    def test_partial_column_does_not_win(self):
        """A column [A, A, B] is not a vertical line."""
        grid = self.grid(
            "A B C D A",
            "A C D A B",
            "B D A B C",
        )
        self.assertEqual(self.scanner.scan_vertical(grid), [])

    def test_vertical_run_length_equals_height(self):
        grid = self.grid(
            "C A",
            "C B",
            "C A",
            "C B",
        )
        lines = self.scanner.scan_vertical(grid)

        self.assertEqual(len(lines), 1)
        self.assertEqual(lines[0].run_length, 4)
        self.assertEqual(lines[0].end, Cell(0, 3))

    def test_single_row_has_no_vertical_lines(self):
        """On a one-row grid each cell is its own column, so no column wins."""
        self.assertEqual(self.scanner.scan(self.grid("A B A B A")), [])

        lines = self.scanner.scan(self.grid("A A A A A"))
        self.assertEqual(len(lines), 1)
        self.assertEqual(lines[0].orientation, Orientation.HORIZONTAL)
        self.assertEqual(lines[0].run_length, 5)

    def test_uniform_grid(self):
        """Every column and every row wins exactly once."""
        grid = self.grid(
            "A A A A A",
            "A A A A A",
            "A A A A A",
        )
        lines = self.scanner.scan(grid)
        vertical = [l for l in lines if l.orientation is Orientation.VERTICAL]
        horizontal = [l for l in lines if l.orientation is Orientation.HORIZONTAL]

        self.assertEqual(len(vertical), 5)
        self.assertEqual(len(horizontal), 3)
        self.assertTrue(all(l.run_length == 3 for l in vertical))
        self.assertTrue(all(l.run_length == 5 for l in horizontal))

    def test_line_order(self):
        """Vertical lines come first, then horizontal lines row by row."""
        grid = self.grid(
            "A A A B C",
            "A C B D B",
            "A D C B D",
        )
        lines = self.scanner.scan(grid)

        self.assertEqual([l.orientation for l in lines],
                         [Orientation.VERTICAL, Orientation.HORIZONTAL])

    def test_line_cells(self):
        grid = self.grid(
            "D A A A C",
            "C D C D C",
            "D C D C D",
        )
        line = self.scanner.scan(grid)[0]

        self.assertEqual(list(line.cells()), [Cell(1, 0), Cell(2, 0), Cell(3, 0)])

    def test_custom_min_run(self):
        scanner = LineScanner(self.catalog, min_run=2)
        grid = self.grid("A A B C C C")
        lines = scanner.scan_horizontal(grid)

        self.assertEqual([l.run_length for l in lines], [2, 3])

    def test_unknown_symbol_rejected(self):
        stranger = Symbol("Z", 1.0)
        a = self.catalog.resolve("A")
        grid = Grid.from_rows([[a, a, stranger]])

        with self.assertRaises(UnknownSymbolError) as ctx:
            self.scanner.scan(grid)
        self.assertEqual(ctx.exception.name, "Z")

    def test_symbol_with_altered_multiplier_rejected(self):
        forged = Symbol("A", 50.0)
        a = self.catalog.resolve("A")
        grid = Grid.from_rows([[a, forged, a]])

        with self.assertRaises(UnknownSymbolError):
            self.scanner.scan(grid)


if __name__ == "__main__":
    unittest.main()
