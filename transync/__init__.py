"""transync - translation overlay synchronization for virtualized item streams."""

__version__ = "0.1.0"
