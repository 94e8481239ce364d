"""
Abstract base class for grid path planning algorithms.

This module defines the common interface grid planners implement: planning
on a Grid, metrics, visualization and path persistence.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import numpy as np

from .grid import Grid
from .node import Node
from .result import PlanResult
from ..utils.geometry import euclidean_distance, segment_clear

logger = logging.getLogger(__name__)


class GridPlanner(ABC):
    """
    Abstract base class for grid path planning algorithms.

    Attributes:
        grid (Grid): Grid the planner runs on; planners mark visited cells in it
        config (Dict[str, Any]): Algorithm-specific configuration parameters
        result (Optional[PlanResult]): Outcome of the last planning run
        path (Optional[List[Node]]): Start-to-goal nodes of the last successful run
        planning_time (float): Time taken to compute the path (seconds)
    """

    def __init__(self, grid: Grid, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the path planner.

        Args:
            grid: Grid containing free and obstacle cells
            config: Dictionary of algorithm-specific parameters loaded from YAML
        """
        self.grid = grid
        self.config = config if config is not None else {}
        self.result: Optional[PlanResult] = None
        self.path: Optional[List[Node]] = None
        self.planning_time: float = 0.0
        self.obstacles: List[Node] = []
        self._initialize_algorithm()

    @abstractmethod
    def _initialize_algorithm(self) -> None:
        """
        Initialize algorithm-specific data structures.

        Called during __init__; subclasses read their parameters here.
        """
        pass

    @abstractmethod
    def plan(self, start: Node, goal: Node) -> PlanResult:
        """
        Compute a collision-free path from start to goal.

        Implementations should store the outcome in self.result, the
        start-to-goal nodes in self.path and the elapsed time in
        self.planning_time.

        Args:
            start: Start node (root of the search)
            goal: Goal node

        Returns:
            PlanResult describing the outcome
        """
        pass

    @abstractmethod
    def get_metrics(self) -> Dict[str, Any]:
        """
        Get algorithm performance metrics from the last planning run.

        Returns:
            Dictionary containing at least path_length, planning_time and
            path_exists
        """
        pass

    @abstractmethod
    def visualize(self, ax, **kwargs) -> None:
        """
        Visualize the planning result on a matplotlib axis.

        Args:
            ax: Matplotlib axis object to draw on
            **kwargs: Additional visualization parameters
        """
        pass

    def validate_path(self) -> bool:
        """
        Validate that the computed path is collision-free.

        Returns:
            True if a path exists and no edge crosses an obstacle square
        """
        if self.path is None or len(self.path) < 2:
            return False

        obstacles = self.obstacles or self.grid.obstacle_list()
        for first, second in zip(self.path, self.path[1:]):
            if not segment_clear(first, second, obstacles):
                logger.debug("Edge %s -> %s crosses an obstacle", first, second)
                return False

        return True

    def get_path_length(self) -> float:
        """
        Calculate the total Euclidean length of the computed path.

        Returns:
            Path length in cells, 0.0 if no path exists
        """
        if self.path is None or len(self.path) < 2:
            return 0.0

        return sum(euclidean_distance(first, second)
                   for first, second in zip(self.path, self.path[1:]))

    def save_path(self, filename: str) -> None:
        """
        Save the computed path to a file.

        Supports multiple formats based on file extension:
        - .npy: NumPy binary format with one (x, y) row per node
        - .json: JSON format with path nodes and metrics
        - .csv: Comma-separated values

        Args:
            filename: Output file path with extension

        Raises:
            ValueError: If no path exists or file format is unsupported
        """
        if self.path is None:
            raise ValueError("No path to save. Run plan() first.")

        coordinates = np.array([(node.x, node.y) for node in self.path], dtype=int)
        if filename.endswith('.npy'):
            np.save(filename, coordinates)
        elif filename.endswith('.json'):
            with open(filename, 'w') as f:
                json.dump({
                    'path': [{'x': node.x, 'y': node.y, 'id': node.id,
                              'pid': node.pid, 'cost': node.cost}
                             for node in self.path],
                    'metrics': self.get_metrics()
                }, f, indent=2)
        elif filename.endswith('.csv'):
            np.savetxt(filename, coordinates, fmt='%d',
                       delimiter=',', header='x,y', comments='')
        else:
            raise ValueError(f"Unsupported file format: {filename}. "
                             f"Use .npy, .json, or .csv")
        logger.info("Saved path with %d nodes to %s", len(self.path), filename)

    def load_path(self, filename: str) -> List[Node]:
        """
        Load a path from a file written by save_path.

        Nodes loaded from .npy or .csv only carry coordinates; ids and
        parent links are rebuilt from the grid size.

        Args:
            filename: Input file path

        Returns:
            List of nodes loaded from file
        """
        n = self.grid.n
        if filename.endswith('.json'):
            with open(filename, 'r') as f:
                data = json.load(f)
            self.path = [Node(entry['x'], entry['y'], entry['cost'], 0.0,
                              entry['id'], entry['pid'])
                         for entry in data['path']]
            return self.path

        if filename.endswith('.npy'):
            coordinates = np.load(filename)
        elif filename.endswith('.csv'):
            coordinates = np.loadtxt(filename, delimiter=',', skiprows=1, dtype=int, ndmin=2)
        else:
            raise ValueError(f"Unsupported file format: {filename}")

        path: List[Node] = []
        for x, y in coordinates:
            parent = path[-1] if path else None
            node = Node.from_grid(int(x), int(y), n,
                                  pid=parent.id if parent else None)
            if parent is not None:
                node.cost = parent.cost + euclidean_distance(parent, node)
            path.append(node)
        self.path = path
        return self.path

    def __repr__(self) -> str:
        """String representation of the planner."""
        return f"{self.__class__.__name__}(config={self.config})"

    def __str__(self) -> str:
        """Human-readable string representation."""
        status = "with path" if self.path else "no path"
        return f"{self.__class__.__name__} ({status})"
