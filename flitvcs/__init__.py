"""A tiny Git-like version control system with objects, an index, branches and checkout."""

__version__ = "0.1.0"