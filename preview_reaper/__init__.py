"""Deletes the per-branch preview database of a pull request from CI."""

__version__ = "0.1.0"
