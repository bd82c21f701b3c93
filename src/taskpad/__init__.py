"""Local to-do list with whole-collection persistence."""

__version__ = "0.1.0"
