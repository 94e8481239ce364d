"""
Main entry point for grid RRT planning.

This CLI builds a grid from YAML configuration files, runs the RRT planner
and prints the result on the console, optionally plotting and saving it.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
import yaml

from grid_rrt.algorithms.rrt import RRTPlanner
from grid_rrt.core.grid import CellState, Grid
from grid_rrt.core.node import Node
from grid_rrt.utils.config_loader import (load_algorithm_config, load_environment_config,
                                          merge_configs)
from grid_rrt.utils.visualization import print_cost, print_grid, print_path

logger = logging.getLogger(__name__)


def create_grid_from_config(env_config: Dict[str, Any]) -> Grid:
    """
    Create a Grid from the environment configuration.

    The start and goal cells are always cleared.

    Args:
        env_config: Environment configuration from YAML

    Returns:
        Grid object
    """
    n = int(env_config['grid_size'])
    if env_config.get('random_obstacles', False):
        rng = np.random.default_rng(env_config.get('obstacle_seed'))
        grid = Grid.random(n, rng)
    else:
        grid = Grid.from_obstacles(n, [tuple(cell) for cell in env_config.get('obstacles', [])])

    for key in ('start_point', 'goal_point'):
        point = env_config[key]
        grid[point['x'], point['y']] = CellState.FREE
    return grid


def create_nodes_from_config(env_config: Dict[str, Any], n: int) -> Tuple[Node, Node]:
    """Build the start (a root node) and goal nodes with canonical ids."""
    start = Node.from_grid(env_config['start_point']['x'], env_config['start_point']['y'], n)
    goal = Node.from_grid(env_config['goal_point']['x'], env_config['goal_point']['y'], n)
    return start, goal


def run_planner(config_dir: str = 'configs', visualize: bool = True, save: bool = False,
                overrides: Optional[Dict[str, Any]] = None, show_costs: bool = False) -> bool:
    """
    Run the RRT planner.

    Args:
        config_dir: Directory containing configuration files
        visualize: Whether to show a matplotlib figure
        save: Whether to save the figure and the path
        overrides: Values overriding the files, shaped like
            {'environment': {...}, 'algorithm': {...}}
        show_costs: Whether to print the cost to reach every tree node

    Returns:
        True if a path was found
    """
    overrides = overrides or {}

    print(f"\n{'='*60}")
    print("Running RRT Path Planning Algorithm")
    print(f"{'='*60}\n")

    print("Loading configurations...")
    env_config = merge_configs(load_environment_config(config_dir),
                               overrides.get('environment', {}))
    alg_config = merge_configs(load_algorithm_config('rrt', config_dir),
                               overrides.get('algorithm', {}))

    grid = create_grid_from_config(env_config)
    start, goal = create_nodes_from_config(env_config, grid.n)
    print(f"Grid: {grid.n}x{grid.n} with {grid.count(CellState.OBSTACLE)} obstacles")
    print(f"Start: ({start.x}, {start.y})")
    print(f"Goal: ({goal.x}, {goal.y})")
    print_grid(grid)

    planner = RRTPlanner(grid, alg_config)
    print(f"Planner: {planner}")

    print("\nPlanning path...")
    result = planner.plan(start, goal)

    print("\n" + "="*60)
    print("Results:")
    print("="*60)
    for key, value in planner.get_metrics().items():
        print(f"  {key}: {value}")
    print("="*60 + "\n")

    if show_costs and result.success:
        print("Cost to reach tree nodes:")
        print_cost(grid, planner.point_list)

    print_path(result.to_node_list(), grid)

    if not result.success:
        print("No path found!")
        return False

    print(f"Path found with {len(planner.path)} nodes")

    if visualize or save:
        fig, ax = plt.subplots(figsize=(8, 8))
        planner.visualize(ax)
        plt.tight_layout()

        if save:
            output_config = alg_config.get('output', {})
            save_path = Path(output_config.get('save_path', 'outputs/rrt/'))
            save_path.mkdir(parents=True, exist_ok=True)

            plot_file = save_path / output_config.get('plot_filename', 'rrt_path.png')
            fig.savefig(plot_file, dpi=150, bbox_inches='tight')
            print(f"Plot saved to: {plot_file}")

            path_file = save_path / output_config.get('path_filename', 'path.json')
            planner.save_path(str(path_file))
            print(f"Path data saved to: {path_file}")

        if visualize:
            plt.show()
        plt.close(fig)

    return True


def main(argv=None):
    """Main entry point with command-line argument parsing."""
    parser = argparse.ArgumentParser(
        description='RRT path planning on a grid',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with the default configs/ directory
  grid-rrt

  # Larger grid, reproducible, no plot
  grid-rrt --size 20 --seed 7 --no-viz

  # Longer steps and save results
  grid-rrt --threshold 3.5 --save
        """
    )

    parser.add_argument(
        '--config-dir', '-c',
        type=str,
        default='configs',
        help='Directory containing YAML configuration files (default: configs)'
    )
    parser.add_argument('--size', '-n', type=int, help='Override the grid size')
    parser.add_argument('--threshold', '-t', type=float,
                        help='Override the maximum distance per move')
    parser.add_argument('--max-iter-factor', type=int,
                        help='Override the iteration budget factor (budget = factor * n * n)')
    parser.add_argument('--seed', type=int,
                        help='Seed both the random grid and the sampler')
    parser.add_argument('--save', '-s', action='store_true',
                        help='Save the plot and the path')
    parser.add_argument('--no-viz', action='store_true', help='Disable the matplotlib figure')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging and print tree costs')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    overrides = {
        'environment': {'grid_size': args.size, 'obstacle_seed': args.seed},
        'algorithm': {'parameters': {'threshold': args.threshold,
                                     'max_iter_factor': args.max_iter_factor,
                                     'random_seed': args.seed}},
    }
    if args.size is not None:
        # Keep the default corners valid on a resized grid.
        overrides['environment']['goal_point'] = {'x': args.size - 1, 'y': args.size - 1}
        overrides['environment']['start_point'] = {'x': 0, 'y': 0}

    try:
        found = run_planner(
            config_dir=args.config_dir,
            visualize=not args.no_viz,
            save=args.save,
            overrides=overrides,
            show_costs=args.verbose
        )
    except (FileNotFoundError, IndexError, ValueError, yaml.YAMLError) as e:
        logger.error("Planning aborted: %s", e)
        sys.exit(1)

    sys.exit(0 if found else 2)


if __name__ == '__main__':
    main()
