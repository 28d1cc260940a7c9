"""Minimal metric-regression test extraction from paired metrics reports."""

__version__ = "0.1.0"

__all__ = ["__version__"]
