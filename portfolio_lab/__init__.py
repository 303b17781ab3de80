"""Computational cores behind the portfolio site's Edgeworth box and Minesweeper toys."""

__version__ = "0.1.0"
