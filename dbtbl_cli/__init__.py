"""Command line interface for db-tbl."""

from dbtbl import __version__

__all__ = ["__version__"]
