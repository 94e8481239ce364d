"""Exceptions raised by the grid planners."""


class InvalidPreconditionError(ValueError):
    """Planner inputs that would make the geometry undefined (bad grid, blocked start/goal, ...)."""
