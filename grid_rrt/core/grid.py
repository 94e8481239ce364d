"""
Grid representation for path planning.

This module defines the Grid class which encapsulates the square occupancy
grid the planners run on: cell classification, bounds-checked access and
the static obstacle list derived from it.
"""

from enum import IntEnum
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .exceptions import InvalidPreconditionError
from .node import Node


class CellState(IntEnum):
    """Classification of a grid cell."""

    FREE = 0
    OBSTACLE = 1
    VISITED = 2
    PATH = 3


class Grid:
    """
    Square n x n occupancy grid backed by a numpy integer array.

    Cells are addressed as ``grid[x, y]`` with ``x`` the row and ``y`` the
    column. The array is wrapped without copying when possible, so marks
    written by a planner are visible to whoever owns the array.

    Attributes:
        cells (np.ndarray): n x n array of CellState values
        n (int): Number of rows/columns
    """

    def __init__(self, cells):
        """
        Wrap an existing n x n array of cell states.

        Args:
            cells: Square 2D array-like of small integers (0 free, 1 obstacle)

        Raises:
            InvalidPreconditionError: If cells is not a writable square 2D
                integer array

        Example:
            >>> grid = Grid(np.zeros((8, 8), dtype=int))
            >>> grid.n
            8
        """
        cells = np.asarray(cells)
        if cells.ndim != 2 or cells.shape[0] != cells.shape[1]:
            raise InvalidPreconditionError(
                f"Grid must be a square 2D array, got shape {cells.shape}")
        if cells.size and not np.issubdtype(cells.dtype, np.integer):
            raise InvalidPreconditionError(
                f"Grid cells must be integers, got dtype {cells.dtype}")
        if not cells.flags.writeable:
            raise InvalidPreconditionError("Grid array is read-only; planners mark visited cells in it")
        self.cells = cells
        self.n = cells.shape[0]

    @classmethod
    def empty(cls, n: int) -> 'Grid':
        """Grid of n x n free cells."""
        return cls(np.zeros((n, n), dtype=int))

    @classmethod
    def from_obstacles(cls, n: int, obstacles: Iterable[Tuple[int, int]]) -> 'Grid':
        """
        Build a free grid and mark the listed cells as obstacles.

        Args:
            n: Number of rows/columns
            obstacles: Iterable of (x, y) cells to block

        Returns:
            New Grid
        """
        grid = cls.empty(n)
        for x, y in obstacles:
            grid[x, y] = CellState.OBSTACLE
        return grid

    @classmethod
    def random(cls, n: int, rng: Optional[np.random.Generator] = None) -> 'Grid':
        """
        Create a random grid.

        Each cell draws an integer uniformly in [0, n] and becomes an
        obstacle when the draw is at least n - 1.

        Args:
            n: Number of rows/columns
            rng: numpy Generator (a fresh unseeded one if omitted)

        Returns:
            New Grid with free and obstacle cells
        """
        rng = rng if rng is not None else np.random.default_rng()
        if n < 2:
            return cls.empty(n)
        draws = rng.integers(0, n, size=(n, n), endpoint=True)
        return cls((draws >= n - 1).astype(int))

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.n and 0 <= y < self.n

    def _check_bounds(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) outside {self.n}x{self.n} grid")

    def __getitem__(self, position: Tuple[int, int]) -> int:
        x, y = position
        self._check_bounds(x, y)
        return int(self.cells[x, y])

    def __setitem__(self, position: Tuple[int, int], state: int) -> None:
        x, y = position
        self._check_bounds(x, y)
        self.cells[x, y] = int(state)

    def is_free(self, x: int, y: int) -> bool:
        """Whether the cell has not been considered yet (state FREE)."""
        return self[x, y] == CellState.FREE

    def obstacle_list(self) -> List[Node]:
        """
        Scan the grid once and collect every obstacle cell.

        Returns:
            Obstacle nodes in row-major order, each with ``id = x * n + y``
        """
        return [Node.from_grid(int(x), int(y), self.n, pid=0)
                for x, y in np.argwhere(self.cells == CellState.OBSTACLE)]

    def count(self, state: int) -> int:
        """Number of cells in the given state."""
        return int(np.count_nonzero(self.cells == state))

    def copy(self) -> 'Grid':
        return Grid(self.cells.copy())

    def __repr__(self) -> str:
        """String representation of the grid."""
        return f"Grid(n={self.n}, obstacles={self.count(CellState.OBSTACLE)})"
