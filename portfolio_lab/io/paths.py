"""Output path helpers for the CLI renderers."""

from __future__ import annotations

from pathlib import Path


def resolve_within_base(path: Path, base_dir: Path) -> Path:
    """Resolve a preview image path, refusing anything outside *base_dir*.

    Relative paths are taken from *base_dir*; ``..`` segments and absolute
    paths that land elsewhere raise :exc:`ValueError`, which the CLI turns
    into a usage error.
    """
    base = base_dir.resolve()
    resolved = (base / path).resolve()
    if resolved == base or base in resolved.parents:
        return resolved
    raise ValueError(f"Path escapes base_dir: {path}")


def prepare_output_path(path: Path, base_dir: Path | None = None) -> Path:
    """Resolve where a rendered box or board image goes and create its folder."""
    resolved = resolve_within_base(path, base_dir) if base_dir is not None else path.resolve()
    resolved.parent.mkdir(parents=True, exist_ok=True)
    return resolved
