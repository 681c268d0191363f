"""pyptree - print the tree of running processes."""

__version__ = "0.1.0"
