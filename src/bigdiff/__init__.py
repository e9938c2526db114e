"""BigDiff — materialize the difference between two directory trees."""

__version__ = "0.3.0"
