"""
Grid RRT - Rapidly-exploring Random Tree planning on occupancy grids

Modules:
    core.node: Grid cell with identity, parent link and cost
    core.grid: Occupancy grid with cell states and obstacle list
    core.result: Planning outcomes (path found / exhausted)
    core.path_planner: Base class for grid planners
    algorithms.rrt: RRT planner and the rrt() entry point
    utils.geometry: Segment versus obstacle-square test
    utils.visualization: Console and matplotlib rendering
    utils.config_loader: YAML configuration management
"""

from .algorithms.rrt import RRTPlanner, rrt
from .core.exceptions import InvalidPreconditionError
from .core.grid import CellState, Grid
from .core.node import Node
from .core.result import Exhausted, PathFound, PlanResult

__version__ = "1.0.0"

__all__ = [
    "RRTPlanner",
    "rrt",
    "InvalidPreconditionError",
    "CellState",
    "Grid",
    "Node",
    "Exhausted",
    "PathFound",
    "PlanResult",
]
