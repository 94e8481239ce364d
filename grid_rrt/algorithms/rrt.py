"""
RRT (Rapidly-exploring Random Tree) algorithm on a grid.

RRT grows a tree from the start cell by sampling random free cells and
attaching each to the closest tree node that can see it. After every
extension the planner checks whether the goal is directly reachable and
stops at the first solution.
"""

import logging
import random
import time
from typing import Any, Dict, List, Optional

import numpy as np

from ..core.exceptions import InvalidPreconditionError
from ..core.grid import CellState, Grid
from ..core.node import Node
from ..core.path_planner import GridPlanner
from ..core.result import Exhausted, PathFound, PlanResult
from ..utils.geometry import check_obstacle, euclidean_distance
from ..utils.visualization import draw_grid

logger = logging.getLogger(__name__)


class RRTPlanner(GridPlanner):
    """
    RRT path planning algorithm on an n x n grid.

    Attributes:
        start_node (Node): Root of the tree
        goal_node (Node): Goal cell
        point_list (List[Node]): All accepted nodes in insertion order
        obstacles (List[Node]): Static obstacle cells of the current run
        threshold (float): Maximum distance of one extension or goal step
        max_iter_factor (int): Iteration budget is max_iter_factor * n * n
        iterations (int): Sampling iterations used in the last run
        rng (random.Random): Source of random samples
    """

    def _initialize_algorithm(self) -> None:
        """Initialize RRT-specific data structures."""
        self.start_node = None
        self.goal_node = None
        self.point_list: List[Node] = []
        self.iterations = 0
        self.samples_rejected = 0

        # Get algorithm parameters from config
        params = self.config.get('parameters', {})
        self.threshold = float(params.get('threshold', 2.0))
        self.max_iter_factor = params.get('max_iter_factor', 20)

        seed = params.get('random_seed', None)
        self.rng = random.Random(seed)

    @property
    def max_iter(self) -> int:
        return self.max_iter_factor * self.grid.n * self.grid.n

    def _validate(self, start: Node, goal: Node) -> None:
        """
        Fail fast on inputs the geometry cannot handle.

        Raises:
            InvalidPreconditionError: On an empty grid, out-of-range or
                blocked start/goal, a malformed start node, a negative
                threshold or a max_iter_factor that is not a non-negative integer
        """
        n = self.grid.n
        if n <= 0:
            raise InvalidPreconditionError(f"Grid size must be positive, got {n}")
        if self.threshold < 0:
            raise InvalidPreconditionError(f"Threshold must be non-negative, got {self.threshold}")
        factor = self.max_iter_factor
        if isinstance(factor, bool) or not isinstance(factor, (int, np.integer)) or factor < 0:
            raise InvalidPreconditionError(
                f"max_iter_factor must be a non-negative integer, got {factor!r}")
        for name, node in (('start', start), ('goal', goal)):
            if not self.grid.in_bounds(node.x, node.y):
                raise InvalidPreconditionError(
                    f"{name} ({node.x}, {node.y}) is outside the {n}x{n} grid")
            if not self.grid.is_free(node.x, node.y):
                raise InvalidPreconditionError(
                    f"{name} ({node.x}, {node.y}) is not a free cell "
                    f"(state {self.grid[node.x, node.y]})")
        if start.id != start.x * n + start.y:
            raise InvalidPreconditionError(
                f"start id {start.id} does not match its cell index {start.x * n + start.y}")
        if start.pid != start.id:
            raise InvalidPreconditionError(
                f"start pid {start.pid} must equal its id {start.id}")

    def _generate_random_node(self) -> Node:
        """
        Sample a grid cell uniformly.

        Returns:
            Node with cost 0, row-major id and pid 0; the pid is assigned by
            the nearest-node search before the node is used
        """
        n = self.grid.n
        x = self.rng.randint(0, n - 1)
        y = self.rng.randint(0, n - 1)
        return Node(x, y, 0.0, 0.0, n * x + y, 0)

    def _find_nearest_point(self, new_node: Node) -> Node:
        """
        Find the closest tree node that can reach new_node in one step.

        Uses distance only, not cost to reach. A tree node qualifies when it
        is within threshold, the segment to new_node is obstacle free, it is
        not new_node itself and its parent is not new_node. Ties keep the
        first node in tree order.

        On success new_node's pid and cost are set from the nearest node.

        Args:
            new_node: Sampled node

        Returns:
            Nearest qualifying node, or a sentinel node (id -1) if none qualifies
        """
        nearest = None
        dist = 0.0
        for node in self.point_list:
            new_dist = euclidean_distance(node, new_node)
            if new_dist > self.threshold:
                continue
            if check_obstacle(node, new_node, self.obstacles):
                continue
            if node.id == new_node.id:
                continue
            # A node whose parent is the sample would close a loop.
            if node.pid == new_node.id:
                continue
            if nearest is not None and new_dist >= dist:
                continue
            nearest = node
            dist = new_dist

        if nearest is None:
            return Node.sentinel()

        new_node.pid = nearest.id
        new_node.cost = nearest.cost + dist
        return nearest

    def _check_goal_visible(self, node: Node) -> bool:
        """
        Connect the goal to the tree if it is reachable from node.

        Args:
            node: Most recently accepted tree node

        Returns:
            True if the goal was appended to the tree
        """
        if check_obstacle(node, self.goal_node, self.obstacles):
            return False
        dist = euclidean_distance(node, self.goal_node)
        if dist > self.threshold:
            return False
        self.goal_node.pid = node.id
        self.goal_node.cost = node.cost + dist
        self.point_list.append(self.goal_node)
        return True

    def _finish(self, result: PlanResult, start_time: float) -> PlanResult:
        self.result = result
        self.path = result.extract_path() if result.success else None
        self.planning_time = time.time() - start_time
        return result

    def plan(self, start: Node, goal: Node) -> PlanResult:
        """
        Grow the tree from start until the goal is reachable or the budget runs out.

        Cells of accepted nodes are marked VISITED in the grid.

        Args:
            start: Root node; its cell must be free and ``pid == id``
            goal: Goal node; its cell must be free

        Returns:
            PathFound with the whole tree (start first, goal last) or
            Exhausted once max_iter samples were drawn

        Raises:
            InvalidPreconditionError: See _validate
        """
        start_time = time.time()
        self._validate(start, goal)

        self.start_node = start
        self.goal_node = goal
        self.obstacles = self.grid.obstacle_list()
        self.point_list = [start]
        self.iterations = 0
        self.samples_rejected = 0
        self.grid[start.x, start.y] = CellState.VISITED

        logger.info("RRT planning started: %dx%d grid, %d obstacles, threshold %.2f, max_iter %d",
                    self.grid.n, self.grid.n, len(self.obstacles), self.threshold, self.max_iter)

        if self._check_goal_visible(start):
            logger.info("Goal visible from start")
            return self._finish(PathFound(self.point_list, 0), start_time)

        # Main RRT loop
        while self.iterations < self.max_iter:
            self.iterations += 1
            new_node = self._generate_random_node()
            if not self.grid.is_free(new_node.x, new_node.y):
                continue

            nearest = self._find_nearest_point(new_node)
            if nearest.is_sentinel:
                self.samples_rejected += 1
                continue

            self.grid[new_node.x, new_node.y] = CellState.VISITED
            self.point_list.append(new_node)
            logger.debug("Iteration %d: added (%d, %d) under %d, tree size %d",
                         self.iterations, new_node.x, new_node.y, new_node.pid,
                         len(self.point_list))
            if self._check_goal_visible(new_node):
                break
        else:
            logger.warning("RRT exhausted %d iterations without reaching the goal",
                           self.iterations)
            self.point_list = []
            return self._finish(Exhausted(self.iterations), start_time)

        logger.info("Goal reached after %d iterations, tree size %d",
                    self.iterations, len(self.point_list))
        return self._finish(PathFound(self.point_list, self.iterations), start_time)

    def get_metrics(self) -> Dict[str, Any]:
        """Get RRT performance metrics."""
        return {
            'algorithm': 'RRT',
            'path_length': self.get_path_length(),
            'planning_time': self.planning_time,
            'iterations': self.iterations,
            'samples_rejected': self.samples_rejected,
            'tree_size': len(self.point_list),
            'goal_reached': self.result is not None and self.result.success,
            'path_exists': self.path is not None
        }

    def visualize(self, ax, show_tree: bool = True, **kwargs) -> None:
        """
        Visualize the grid, the RRT tree and the path.

        Args:
            ax: Matplotlib axis
            show_tree: Whether to draw the full tree
            **kwargs: Additional options passed to draw_grid
        """
        vis_config = self.config.get('visualization', {})
        draw_grid(
            ax,
            self.grid,
            tree=self.point_list if show_tree else None,
            path=self.path,
            start=self.start_node,
            goal=self.goal_node,
            tree_color=kwargs.pop('tree_color', vis_config.get('tree_color', 'blue')),
            tree_alpha=kwargs.pop('tree_alpha', vis_config.get('tree_alpha', 0.4)),
            path_color=kwargs.pop('path_color', vis_config.get('path_color', 'green')),
            path_label="RRT Path",
            **kwargs
        )

        ax.set_title(f"RRT Algorithm\n"
                     f"Length: {self.get_path_length():.2f}, "
                     f"Time: {self.planning_time:.3f}s, "
                     f"Nodes: {len(self.point_list)}")


def rrt(grid, n: int, start: Node, goal: Node, max_iter_factor: int,
        threshold: float, rng: Optional[random.Random] = None) -> List[Node]:
    """
    Run RRT and return the flat node sequence.

    Args:
        grid: Grid, square integer numpy array or list of rows; cells are
            marked in place (list rows are updated once planning ends)
        n: Number of rows/columns
        start: Start node with ``id == x * n + y`` and ``pid == id``
        goal: Goal node
        max_iter_factor: Iteration budget is max_iter_factor * n * n
        threshold: Maximum distance per move
        rng: Random generator to sample from (seeded generators make runs
            reproducible)

    Returns:
        Tree nodes with the start first and the goal last, or a single
        sentinel node (id -1) if no path was found

    Raises:
        InvalidPreconditionError: If n does not describe the grid or the
            planner rejects the inputs
    """
    if n <= 0:
        raise InvalidPreconditionError(f"Grid size must be positive, got {n}")
    rows = None
    if not isinstance(grid, Grid):
        if not isinstance(grid, np.ndarray):
            if not all(isinstance(row, list) for row in grid):
                raise InvalidPreconditionError("Grid rows must be lists so visited cells can be marked")
            rows = grid
        grid = Grid(np.array(grid) if rows is not None else grid)
    if grid.n != n:
        raise InvalidPreconditionError(f"Grid is {grid.n}x{grid.n} but n is {n}")

    planner = RRTPlanner(grid, {'parameters': {'threshold': threshold,
                                               'max_iter_factor': max_iter_factor}})
    if rng is not None:
        planner.rng = rng
    try:
        return planner.plan(start, goal).to_node_list()
    finally:
        if rows is not None:
            # Nested lists were copied into an array; hand the marks back.
            for x, row in enumerate(grid.cells.tolist()):
                rows[x][:] = row
