import math
import random

import numpy as np
import pytest

from grid_rrt.algorithms.rrt import RRTPlanner, rrt
from grid_rrt.core.exceptions import InvalidPreconditionError
from grid_rrt.core.grid import CellState, Grid
from grid_rrt.core.node import Node


class ScriptedRandom:
    """Stands in for random.Random, returning a fixed sequence of integers."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def randint(self, a, b):
        self.calls += 1
        value = self.values.pop(0)
        assert a <= value <= b
        return value


def make_planner(grid, threshold=10.0, max_iter_factor=20, seed=None):
    return RRTPlanner(grid, {'parameters': {'threshold': threshold,
                                            'max_iter_factor': max_iter_factor,
                                            'random_seed': seed}})


# Nearest-node search

def _search_tree(n=10):
    far = Node.from_grid(0, 5, n, cost=0.0)
    near = Node.from_grid(5, 8, n, cost=1.0)
    return far, near


def test_nearest_picks_the_closest_node_within_threshold():
    planner = make_planner(Grid.empty(10), threshold=10.0)
    far, near = _search_tree()
    planner.point_list = [far, near]
    candidate = Node(5, 5, 0.0, 0.0, 55, 0)

    nearest = planner._find_nearest_point(candidate)

    assert nearest is near
    assert candidate.pid == near.id
    assert candidate.cost == pytest.approx(near.cost + 3.0)


def test_nearest_returns_sentinel_beyond_threshold():
    planner = make_planner(Grid.empty(10), threshold=2.0)
    planner.point_list = list(_search_tree())
    candidate = Node(5, 5, 0.0, 0.0, 55, 0)

    nearest = planner._find_nearest_point(candidate)

    assert nearest.is_sentinel
    assert nearest.id == -1
    assert candidate.pid == 0 and candidate.cost == 0.0


def test_nearest_ties_keep_first_node_in_tree_order():
    planner = make_planner(Grid.empty(10), threshold=10.0)
    left = Node.from_grid(5, 2, 10)
    right = Node.from_grid(5, 8, 10)
    planner.point_list = [left, right]
    assert planner._find_nearest_point(Node(5, 5, 0.0, 0.0, 55, 0)) is left

    planner.point_list = [right, left]
    assert planner._find_nearest_point(Node(5, 5, 0.0, 0.0, 55, 0)) is right


def test_nearest_skips_nodes_behind_obstacles():
    grid = Grid.from_obstacles(10, [(5, 7)])
    planner = make_planner(grid, threshold=10.0)
    planner.obstacles = grid.obstacle_list()
    far, near = _search_tree()
    planner.point_list = [far, near]
    candidate = Node(5, 5, 0.0, 0.0, 55, 0)

    assert planner._find_nearest_point(candidate) is far
    assert candidate.cost == pytest.approx(5.0)


def test_nearest_skips_node_with_same_id():
    planner = make_planner(Grid.empty(10), threshold=10.0)
    far, near = _search_tree()
    planner.point_list = [far, near]
    candidate = Node(5, 5, 0.0, 0.0, near.id, 0)

    assert planner._find_nearest_point(candidate) is far


def test_nearest_skips_node_whose_parent_is_the_candidate():
    # Documented rule: a tree node whose pid equals the candidate's id is
    # never chosen as its parent.
    planner = make_planner(Grid.empty(10), threshold=10.0)
    far = Node.from_grid(0, 5, 10)
    near = Node.from_grid(5, 8, 10, pid=55)
    planner.point_list = [far, near]
    candidate = Node(5, 5, 0.0, 0.0, 55, 0)

    assert planner._find_nearest_point(candidate) is far
    assert candidate.pid == far.id


# Sampler

def test_random_node_is_a_fresh_cell_in_bounds():
    planner = make_planner(Grid.empty(6), seed=5)
    for _ in range(200):
        node = planner._generate_random_node()
        assert 0 <= node.x < 6 and 0 <= node.y < 6
        assert node.id == node.x * 6 + node.y
        assert node.pid == 0 and node.cost == 0.0


def test_seeded_sampler_is_reproducible():
    a = make_planner(Grid.empty(9), seed=11)
    b = make_planner(Grid.empty(9), seed=11)
    first = [(n.x, n.y) for n in (a._generate_random_node() for _ in range(50))]
    second = [(n.x, n.y) for n in (b._generate_random_node() for _ in range(50))]
    assert first == second


# Goal visibility

def test_goal_visible_appends_goal():
    planner = make_planner(Grid.empty(8), threshold=3.0)
    node = Node.from_grid(4, 4, 8, cost=2.0)
    planner.goal_node = Node.from_grid(6, 6, 8)
    planner.point_list = [node]

    assert planner._check_goal_visible(node)
    assert planner.point_list[-1] is planner.goal_node
    assert planner.goal_node.pid == node.id
    assert planner.goal_node.cost == pytest.approx(2.0 + 2 * math.sqrt(2))


@pytest.mark.parametrize("obstacles,threshold", [([(5, 5)], 3.0), ([], 2.0)])
def test_goal_not_visible_leaves_goal_untouched(obstacles, threshold):
    grid = Grid.from_obstacles(8, obstacles)
    planner = make_planner(grid, threshold=threshold)
    planner.obstacles = grid.obstacle_list()
    node = Node.from_grid(4, 4, 8, cost=2.0)
    goal = Node.from_grid(6, 6, 8)
    planner.goal_node = goal
    planner.point_list = [node]

    assert not planner._check_goal_visible(node)
    assert planner.point_list == [node]
    assert goal.pid == goal.id and goal.cost == 0.0


# Planning loop

def test_goal_visible_from_start_returns_two_nodes(free_grid, start, goal):
    planner = make_planner(free_grid, threshold=9.9)
    result = planner.plan(start, goal)

    assert result.success
    assert result.iterations == 0
    assert result.to_node_list() == [start, goal]
    assert goal.pid == start.id
    assert goal.cost == pytest.approx(7 * math.sqrt(2))
    assert free_grid[0, 0] == CellState.VISITED


def test_rrt_function_returns_start_and_goal(start, goal):
    cells = np.zeros((8, 8), dtype=int)
    nodes = rrt(cells, 8, start, goal, max_iter_factor=1, threshold=10.0)

    assert [(n.x, n.y) for n in nodes] == [(0, 0), (7, 7)]
    assert cells[0, 0] == CellState.VISITED


def test_rrt_function_marks_list_of_lists_in_place(start, goal):
    cells = [[0] * 8 for _ in range(8)]
    cells[3][4] = 1
    nodes = rrt(cells, 8, start, goal, max_iter_factor=1, threshold=10.0)

    assert [(n.x, n.y) for n in nodes] == [(0, 0), (7, 7)]
    assert cells[0][0] == CellState.VISITED
    assert cells[3][4] == CellState.OBSTACLE
    assert all(isinstance(row, list) for row in cells)


def test_rrt_function_marks_list_grid_during_growth(start):
    cells = [[0] * 8 for _ in range(8)]
    goal = Node.from_grid(4, 0, 8)
    rrt(cells, 8, start, goal, 1, 2.0, rng=ScriptedRandom([2, 0]))
    assert cells[0][0] == CellState.VISITED
    assert cells[2][0] == CellState.VISITED
    assert cells[4][0] == CellState.FREE


def test_rrt_function_rejects_immutable_rows(start, goal):
    cells = tuple(tuple([0] * 8) for _ in range(8))
    with pytest.raises(InvalidPreconditionError):
        rrt(cells, 8, start, goal, 1, 10.0)


def test_rrt_function_rejects_read_only_array(start, goal):
    cells = np.zeros((8, 8), dtype=int)
    cells.setflags(write=False)
    with pytest.raises(InvalidPreconditionError):
        rrt(cells, 8, start, goal, 1, 10.0)



def test_enclosed_goal_exhausts_budget(enclosed_goal_grid, start, goal, rng):
    planner = make_planner(enclosed_goal_grid, threshold=2.0, max_iter_factor=2)
    planner.rng = rng
    result = planner.plan(start, goal)

    assert not result.success
    assert result.iterations == 2 * 8 * 8
    nodes = result.to_node_list()
    assert len(nodes) == 1 and nodes[0].id == -1
    assert planner.point_list == []
    assert planner.path is None


def test_rrt_function_returns_sentinel_on_failure(enclosed_goal_grid, start, goal, rng):
    nodes = rrt(enclosed_goal_grid, 8, start, goal, max_iter_factor=1,
                threshold=2.0, rng=rng)
    assert len(nodes) == 1
    assert nodes[0].is_sentinel


def test_scripted_run_rejects_occupied_and_unreachable_samples():
    grid = Grid.empty(8)
    start = Node.from_grid(0, 0, 8)
    goal = Node.from_grid(4, 0, 8)
    planner = make_planner(grid, threshold=2.0)
    # Start cell (occupied), far corner (no neighbour in reach), then (2, 0).
    planner.rng = ScriptedRandom([0, 0, 7, 7, 2, 0])

    result = planner.plan(start, goal)

    assert result.success
    assert result.iterations == 3
    assert planner.samples_rejected == 1
    assert [(n.x, n.y) for n in result.to_node_list()] == [(0, 0), (2, 0), (4, 0)]
    assert goal.pid == 2 * 8 + 0
    assert goal.cost == pytest.approx(4.0)
    assert grid[2, 0] == CellState.VISITED
    assert grid[7, 7] == CellState.FREE
    assert grid[4, 0] == CellState.FREE


def test_tree_grows_to_goal_around_obstacles():
    grid = Grid.from_obstacles(8, [(2, 2), (3, 3), (4, 4), (5, 5), (3, 2), (4, 3)])
    start = Node.from_grid(0, 0, 8)
    goal = Node.from_grid(7, 7, 8)
    planner = make_planner(grid, threshold=3.0, max_iter_factor=50, seed=7)

    result = planner.plan(start, goal)

    assert result.success
    tree = result.to_node_list()
    assert tree[0] is start and tree[-1] is goal

    seen_ids = set()
    for node in tree:
        if node is not start:
            assert node.pid in seen_ids
        seen_ids.add(node.id)

    for node in tree[:-1]:
        assert grid[node.x, node.y] == CellState.VISITED
    assert grid.count(CellState.VISITED) == len(tree) - 1

    path = result.extract_path()
    assert path[0] is start and path[-1] is goal
    assert len(path) <= len(tree)
    assert len({node.id for node in path}) == len(path)
    for first, second in zip(path, path[1:]):
        assert math.hypot(first.x - second.x, first.y - second.y) <= 3.0
        assert second.cost >= first.cost
    assert planner.validate_path()
    assert planner.get_path_length() == pytest.approx(goal.cost)


def test_fresh_state_per_run():
    grid = Grid.empty(8)
    planner = make_planner(grid, threshold=9.9)
    planner.plan(Node.from_grid(0, 0, 8), Node.from_grid(7, 7, 8))
    planner.plan(Node.from_grid(0, 7, 8), Node.from_grid(7, 0, 8))
    assert [(n.x, n.y) for n in planner.point_list] == [(0, 7), (7, 0)]


def test_metrics(free_grid, start, goal):
    planner = make_planner(free_grid, threshold=9.9)
    planner.plan(start, goal)
    metrics = planner.get_metrics()
    assert metrics['algorithm'] == 'RRT'
    assert metrics['goal_reached'] and metrics['path_exists']
    assert metrics['tree_size'] == 2
    assert metrics['path_length'] == pytest.approx(7 * math.sqrt(2))


# Preconditions

def test_start_on_obstacle_is_rejected(goal):
    grid = Grid.from_obstacles(8, [(0, 0)])
    with pytest.raises(InvalidPreconditionError):
        make_planner(grid).plan(Node.from_grid(0, 0, 8), goal)


def test_goal_outside_grid_is_rejected(free_grid, start):
    with pytest.raises(InvalidPreconditionError):
        make_planner(free_grid).plan(start, Node.from_grid(8, 0, 8))


def test_start_must_be_a_root_with_canonical_id(free_grid, goal):
    with pytest.raises(InvalidPreconditionError):
        make_planner(free_grid).plan(Node(1, 1, id=9, pid=0), goal)
    with pytest.raises(InvalidPreconditionError):
        make_planner(free_grid).plan(Node(1, 1, id=3, pid=3), goal)


def test_negative_threshold_is_rejected(free_grid, start, goal):
    with pytest.raises(InvalidPreconditionError):
        make_planner(free_grid, threshold=-1.0).plan(start, goal)


@pytest.mark.parametrize("factor", [0.5, 2.0, "3", True, -1])
def test_max_iter_factor_must_be_a_non_negative_integer(free_grid, start, goal, factor):
    planner = make_planner(free_grid, threshold=2.0, max_iter_factor=factor)
    with pytest.raises(InvalidPreconditionError):
        planner.plan(start, goal)
    assert free_grid[0, 0] == CellState.FREE


def test_max_iter_factor_accepts_numpy_integers(start):
    grid = Grid.empty(8)
    planner = make_planner(grid, threshold=2.0, max_iter_factor=np.int64(1))
    planner.rng = ScriptedRandom([2, 0])
    assert planner.plan(start, Node.from_grid(4, 0, 8)).success



def test_rrt_function_checks_grid_size(start, goal):
    with pytest.raises(InvalidPreconditionError):
        rrt(Grid.empty(8), 6, start, goal, 1, 2.0)
    with pytest.raises(InvalidPreconditionError):
        rrt(Grid.empty(8), 0, start, goal, 1, 2.0)


def test_rrt_accepts_a_substitute_generator(free_grid, start):
    goal = Node.from_grid(4, 0, 8)
    nodes = rrt(free_grid, 8, start, goal, 1, 2.0, rng=ScriptedRandom([2, 0]))
    assert [(n.x, n.y) for n in nodes] == [(0, 0), (2, 0), (4, 0)]


def test_default_generator_is_a_random_instance(free_grid):
    assert isinstance(make_planner(free_grid).rng, random.Random)
