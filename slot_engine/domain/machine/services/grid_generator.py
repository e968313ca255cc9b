# slot_engine/domain/machine/services/grid_generator.py
import logging

from ..entities.grid import Grid
from ..entities.symbol import SymbolCatalog
from ..errors import ConfigurationError


class GridGenerator:
    """
    Draws a fresh symbol grid for each spin.
    Each cell is an independent uniform draw (with replacement) from the
    catalog, taken in row-major order so that a seeded RNG always produces
    the same grid.
    """
    def __init__(self):
        self.logger = logging.getLogger("domain.machine.grid_generator")

    def generate(self, width: int, height: int, catalog: SymbolCatalog, rng) -> Grid:
        """
        Draw a grid.

        Args:
            width: Number of columns
            height: Number of rows
            catalog: Symbols to draw from
            rng: RNG strategy providing get_random_int(min_val, max_val)

        Returns:
            New immutable Grid

        Raises:
            ConfigurationError: If the catalog is empty or a dimension is not positive
        """
        if width <= 0 or height <= 0:
            error_msg = f"Grid dimensions must be positive, got {width}x{height}"
            self.logger.error(error_msg)
            raise ConfigurationError(error_msg)
        if catalog is None or len(catalog) == 0:
            error_msg = "Cannot draw a grid from an empty symbol catalog"
            self.logger.error(error_msg)
            raise ConfigurationError(error_msg)

        last_index = len(catalog) - 1
        rows = []
        for _ in range(height):
            rows.append(tuple(catalog[rng.get_random_int(0, last_index)] for _ in range(width)))

        grid = Grid(tuple(rows))
        self.logger.debug(f"Generated grid {width}x{height}: {grid.names()}")
        return grid
