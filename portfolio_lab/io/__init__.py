"""I/O helpers."""

from portfolio_lab.io.paths import prepare_output_path, resolve_within_base

__all__ = ["prepare_output_path", "resolve_within_base"]
