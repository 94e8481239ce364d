"""
Planning outcomes.

A planning run ends either with a tree that reaches the goal
(:class:`PathFound`) or with the iteration budget spent
(:class:`Exhausted`). Both expose ``to_node_list()`` for callers that want
the flat node sequence, where failure is encoded as a single sentinel node.
"""

from typing import Dict, List

from .node import Node


class PlanResult:
    """Base class for planning outcomes."""

    success = False

    def to_node_list(self) -> List[Node]:
        raise NotImplementedError

    def extract_path(self) -> List[Node]:
        raise NotImplementedError


class PathFound(PlanResult):
    """
    The goal was connected to the tree.

    Attributes:
        tree (List[Node]): Every accepted node in insertion order; the start
            is first and the goal is last
        iterations (int): Sampling iterations used (0 when the goal was
            visible from the start)
    """

    success = True

    def __init__(self, tree: List[Node], iterations: int = 0):
        self.tree = tree
        self.iterations = iterations

    @property
    def start(self) -> Node:
        return self.tree[0]

    @property
    def goal(self) -> Node:
        return self.tree[-1]

    def to_node_list(self) -> List[Node]:
        return list(self.tree)

    def extract_path(self) -> List[Node]:
        """
        Follow parent links from the goal back to the start.

        The tree also holds branches that lead nowhere, so the path is
        rebuilt by walking ``pid`` links.

        Returns:
            Nodes from start to goal

        Raises:
            ValueError: If a parent id is missing from the tree or a cycle
                is found
        """
        by_id: Dict[int, Node] = {node.id: node for node in self.tree}
        node = self.goal
        path = [node]
        seen = {node.id}
        while not node.is_root:
            parent = by_id.get(node.pid)
            if parent is None:
                raise ValueError(f"Parent {node.pid} of node {node.id} is not in the tree")
            if parent.id in seen:
                raise ValueError(f"Cycle through node {parent.id} in parent links")
            seen.add(parent.id)
            path.append(parent)
            node = parent
        return path[::-1]

    def __repr__(self) -> str:
        return f"PathFound(tree_size={len(self.tree)}, iterations={self.iterations})"


class Exhausted(PlanResult):
    """
    The iteration budget ran out before the goal became reachable.

    Attributes:
        iterations (int): Sampling iterations spent
    """

    def __init__(self, iterations: int):
        self.iterations = iterations

    def to_node_list(self) -> List[Node]:
        return [Node.sentinel()]

    def extract_path(self) -> List[Node]:
        return []

    def __repr__(self) -> str:
        return f"Exhausted(iterations={self.iterations})"
