"""Grid planning algorithms."""
