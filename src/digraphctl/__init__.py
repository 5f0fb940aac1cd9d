"""digraphctl — dependency-injection graph builder and filter."""

__version__ = "0.1.0"
