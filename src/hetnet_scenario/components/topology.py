import numpy as np

from ..errors import ConfigurationError


class TopologyBuilder:
    """
    Deterministic base-station placement

    The anchor cell sits at the centre of the area. Small cell ``i`` sits on
    a grid ``row_width`` cells wide:

        x = origin_x + (i mod row_width) * spacing
        y = origin_y + (i div row_width) * spacing

    All cells share the same antenna height. No random draws are made, so
    the topology does not depend on the simulation seed.

    Parameters
    ----------
    max_x, max_y : float
        Area size in metres
    grid : GridLayout
        Row width, spacing, origin and antenna height
    """

    def __init__(self, max_x: float, max_y: float, grid):
        if max_x <= 0 or max_y <= 0:
            raise ConfigurationError(f'area must have positive size, got {max_x} x {max_y}')
        if grid.row_width < 1:
            raise ConfigurationError(f'grid row width must be at least 1, got {grid.row_width}')
        if grid.spacing <= 0:
            raise ConfigurationError(f'grid spacing must be positive, got {grid.spacing}')
        self.max_x = max_x
        self.max_y = max_y
        self.grid = grid

    def anchor_position(self) -> np.ndarray:
        return np.array([self.max_x / 2, self.max_y / 2, self.grid.height])

    def small_cell_positions(self, n_small_cells: int) -> np.ndarray:
        """Grid positions of the small cells

        Returns
        -------
        np.ndarray
            (N, 3) array, row i is small cell i
        """
        if n_small_cells < 0:
            raise ConfigurationError(f'number of small cells must be non-negative, got {n_small_cells}')
        i = np.arange(n_small_cells)
        x = self.grid.origin_x + (i % self.grid.row_width) * self.grid.spacing
        y = self.grid.origin_y + (i // self.grid.row_width) * self.grid.spacing
        z = np.full(n_small_cells, self.grid.height, dtype=float)
        return np.stack([x, y, z], axis=-1).astype(float).reshape(n_small_cells, 3)

    def build(self, n_small_cells: int) -> np.ndarray:
        """Anchor position followed by the small-cell grid

        Returns
        -------
        np.ndarray
            (N+1, 3) array; row 0 is the anchor, row i+1 is small cell i
        """
        return np.vstack([self.anchor_position(),
                          self.small_cell_positions(n_small_cells)])

    def overlaps_anchor(self, n_small_cells: int) -> np.ndarray:
        """Indices of small cells placed exactly on the anchor"""
        positions = self.small_cell_positions(n_small_cells)
        hits = np.all(np.isclose(positions, self.anchor_position()), axis=1)
        return np.flatnonzero(hits)
