"""Planning data model: nodes, grids, results and the planner base class."""
