"""
Node class for grid-based path planning algorithms.

A node is a grid cell carrying the planning metadata the tree needs:
identity, parent link and accumulated cost.
"""

from typing import Optional

SENTINEL_ID = -1


class Node:
    """
    Represents a grid cell in the search tree.

    Equality is positional: two nodes are equal when their ``x`` and ``y``
    match, whatever their cost, id or parent. Use :meth:`same_identity`
    to compare ids instead.

    Attributes:
        x (int): Row index in the grid
        y (int): Column index in the grid
        id (int): Unique identity, canonically ``x * n + y``
        pid (int): Id of the parent node (equal to ``id`` for the root)
        cost (float): Euclidean path length from the root to this node
        h_cost (float): Heuristic cost (always 0 for RRT)
    """

    __slots__ = ('_x', '_y', '_id', 'pid', 'cost', 'h_cost')

    def __init__(self, x: int, y: int, cost: float = 0.0, h_cost: float = 0.0,
                 id: int = 0, pid: int = 0):
        """
        Initialize a node at given grid coordinates.

        Args:
            x: Row index
            y: Column index
            cost: Cost to reach this node
            h_cost: Heuristic cost of this node
            id: Node's id
            pid: Node's parent's id
        """
        self._x = x
        self._y = y
        self._id = id
        self.pid = pid
        self.cost = cost
        self.h_cost = h_cost

    @classmethod
    def from_grid(cls, x: int, y: int, n: int, cost: float = 0.0,
                  pid: Optional[int] = None) -> 'Node':
        """
        Create a node whose id is the row-major index of (x, y).

        Args:
            x: Row index
            y: Column index
            n: Number of rows/columns of the grid
            cost: Cost to reach this node
            pid: Parent id; defaults to the node's own id (a root node)

        Returns:
            Node with ``id == x * n + y``
        """
        node_id = x * n + y
        return cls(x, y, cost, 0.0, node_id, node_id if pid is None else pid)

    @classmethod
    def sentinel(cls) -> 'Node':
        """Node carrying id -1, meaning "no result"."""
        return cls(SENTINEL_ID, SENTINEL_ID, SENTINEL_ID, SENTINEL_ID,
                   SENTINEL_ID, SENTINEL_ID)

    @property
    def x(self) -> int:
        return self._x

    @property
    def y(self) -> int:
        return self._y

    @property
    def id(self) -> int:
        return self._id

    @property
    def is_sentinel(self) -> bool:
        return self._id == SENTINEL_ID

    @property
    def is_root(self) -> bool:
        return self.pid == self._id

    @property
    def total_cost(self) -> float:
        """Cost plus heuristic cost, the key used to order open lists."""
        return self.cost + self.h_cost

    def same_identity(self, other: 'Node') -> bool:
        """Whether both nodes carry the same id."""
        return self._id == other.id

    def copy(self) -> 'Node':
        return Node(self._x, self._y, self.cost, self.h_cost, self._id, self.pid)

    def __add__(self, other: 'Node') -> 'Node':
        return Node(self._x + other.x, self._y + other.y, self.cost + other.cost)

    def __sub__(self, other: 'Node') -> 'Node':
        return Node(self._x - other.x, self._y - other.y)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self._x == other.x and self._y == other.y

    def __hash__(self) -> int:
        return hash((self._x, self._y))

    def __repr__(self) -> str:
        """String representation of the node."""
        return (f"Node(x={self._x}, y={self._y}, id={self._id}, pid={self.pid}, "
                f"cost={self.cost:.2f})")
