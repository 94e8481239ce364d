import random

import pytest

from grid_rrt.core.grid import Grid
from grid_rrt.core.node import Node


@pytest.fixture
def free_grid():
    return Grid.empty(8)


@pytest.fixture
def enclosed_goal_grid():
    # Goal at (7, 7) walled off by its three neighbours.
    return Grid.from_obstacles(8, [(6, 6), (6, 7), (7, 6)])


@pytest.fixture
def start():
    return Node.from_grid(0, 0, 8)


@pytest.fixture
def goal():
    return Node.from_grid(7, 7, 8)


@pytest.fixture
def rng():
    return random.Random(1234)
