"""
Visualization utilities for grid path planning.

This module provides console rendering of the grid (colored cell states,
path marking, cost table) and matplotlib drawing of the grid, the search
tree and the path.
"""

from typing import List, Optional, Sequence

import matplotlib.patches as patches

from ..core.grid import CellState, Grid
from ..core.node import Node
from ..core.result import PathFound

RESET = "\033[0m"
RED = "\033[31m"
GREEN = "\033[32m"
BLUE = "\033[34m"

CELL_COLORS = {
    CellState.OBSTACLE: RED,
    CellState.VISITED: BLUE,
    CellState.PATH: GREEN,
}


def print_grid(grid: Grid, color: bool = True) -> None:
    """
    Print the grid with a legend, one row per line.

    Args:
        grid: Grid to print
        color: Whether to wrap obstacle, visited and path cells in ANSI colors
    """
    n = grid.n
    print("Grid: ")
    print("1. Points not considered ---> 0")
    print("2. Obstacles             ---> 1")
    print("3. Points considered     ---> 2")
    print("4. Points in final path  ---> 3")
    print("---" * n)
    for x in range(n):
        cells = []
        for y in range(n):
            value = grid[x, y]
            prefix = CELL_COLORS.get(value, "") if color else ""
            cells.append(f"{prefix}{value}{RESET if prefix else ''}")
        print(" , ".join(cells) + " , ")
        print()
    print("---" * n)


def mark_path(grid: Grid, nodes: Sequence[Node]) -> List[Node]:
    """
    Mark the start-to-goal chain of a planner's node list as PATH.

    Args:
        grid: Grid to modify
        nodes: Node list as returned by ``rrt`` (goal last), or a single
            sentinel node

    Returns:
        The marked nodes from start to goal, empty for a failure list
    """
    if not nodes or nodes[0].is_sentinel:
        return []
    path = PathFound(list(nodes)).extract_path()
    for node in path:
        grid[node.x, node.y] = CellState.PATH
    return path


def print_path(nodes: Sequence[Node], grid: Grid, color: bool = True) -> None:
    """
    Print the path found by a planner on the grid.

    Args:
        nodes: Node list as returned by ``rrt``
        grid: Grid to mark and print
        color: Whether to use ANSI colors
    """
    if not mark_path(grid, nodes):
        print("No path exists")
    print_grid(grid, color=color)


def print_cost(grid: Grid, point_list: Sequence[Node]) -> None:
    """
    Print the cost to reach every tree node, laid out as the grid.

    Args:
        grid: Grid the planner ran on
        point_list: Nodes that have been considered; cells with no node are blank
    """
    costs = {}
    for node in point_list:
        costs.setdefault((node.x, node.y), node.cost)
    for x in range(grid.n):
        row = []
        for y in range(grid.n):
            cost = costs.get((x, y))
            row.append(f"{cost:>10.4g} , " if cost is not None else f"{'  , ':>10}")
        print("".join(row))
        print()


def draw_grid(ax,
              grid: Grid,
              tree: Optional[Sequence[Node]] = None,
              path: Optional[Sequence[Node]] = None,
              start: Optional[Node] = None,
              goal: Optional[Node] = None,
              tree_color: str = 'blue',
              tree_alpha: float = 0.4,
              path_color: str = 'green',
              path_label: str = "Path"):
    """
    Draw the grid with obstacles, tree edges, start, goal and path.

    Obstacle cells are drawn as unit squares centred on their coordinates,
    the same footprint the collision test uses.

    Args:
        ax: Matplotlib axis to draw on
        grid: Grid to draw
        tree: Optional tree nodes; each is joined to its parent
        path: Optional start-to-goal nodes
        start: Optional start node
        goal: Optional goal node
        tree_color: Color of tree edges
        tree_alpha: Transparency of tree edges
        path_color: Color for the path line
        path_label: Label for the path in legend

    Example:
        >>> fig, ax = plt.subplots()
        >>> draw_grid(ax, Grid.from_obstacles(8, [(3, 3)]), start=start, goal=goal)
        >>> plt.show()
    """
    ax.clear()
    n = grid.n

    for x in range(n):
        for y in range(n):
            if grid[x, y] != CellState.OBSTACLE:
                continue
            ax.add_patch(patches.Rectangle(
                (x - 0.5, y - 0.5), 1.0, 1.0,
                facecolor='grey',
                edgecolor='black',
                linewidth=1.0,
                zorder=1
            ))

    if tree:
        by_id = {node.id: node for node in tree}
        for node in tree:
            parent = by_id.get(node.pid)
            if parent is None or parent is node:
                continue
            ax.plot([node.x, parent.x], [node.y, parent.y],
                    color=tree_color, linewidth=0.8, alpha=tree_alpha, zorder=2)

    if path:
        path_x = [node.x for node in path]
        path_y = [node.y for node in path]
        ax.plot(path_x, path_y, color=path_color, linewidth=2,
                label=path_label, zorder=3, marker='o', markersize=4)

    if start is not None:
        ax.scatter(start.x, start.y, color='green', s=100, marker='o',
                   label="Start", zorder=10, edgecolors='black', linewidths=1.5)

    if goal is not None:
        ax.scatter(goal.x, goal.y, color='red', s=100, marker='*',
                   label="Goal", zorder=10, edgecolors='black', linewidths=1.5)

    ax.set_xlim(-0.5, n - 0.5)
    ax.set_ylim(-0.5, n - 0.5)
    ax.set_xlabel("X (row)")
    ax.set_ylabel("Y (column)")
    ax.set_aspect('equal', adjustable='box')
    ax.grid(True, alpha=0.3)
    if start is not None or goal is not None or path:
        ax.legend(loc='best')
