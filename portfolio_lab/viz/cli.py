"""CLI entrypoint: sample curves, render previews, and inspect board seeds.

Supports ``--config path/to/config.json`` for repeatable runs. CLI arguments
override config-file values; config-file values override built-in defaults.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from random import Random

from portfolio_lab.config.constants import (
    CURVE_STEPS,
    CURVE_TOLERANCE,
    DEFAULT_PRESET,
    DEFAULT_UTILITY_FUNCTION,
)
from portfolio_lab.config.types import PRESETS, CurveConfig
from portfolio_lab.econ.box import EdgeworthBox
from portfolio_lab.econ.curves import curve_is_drawable, sample_indifference_curve
from portfolio_lab.econ.utility import Agent, BoxDimensions
from portfolio_lab.mines.game import MinesweeperGame
from portfolio_lab.mines.seed import (
    encode_seed,
    generate_random_seed,
    seed_from_url,
    seed_url,
)
from portfolio_lab.viz.render import board_to_text, render_board, render_edgeworth_box
from portfolio_lab.viz.theme import get_theme

# ---------------------------------------------------------------------------
# Value parsing helpers
# ---------------------------------------------------------------------------


def _coerce_bool(raw: object, key: str) -> bool:
    """Read an on/off switch such as ``algebraic`` from the CLI or a config file."""
    if isinstance(raw, bool):
        return raw
    text = raw.strip().lower() if isinstance(raw, str) else None
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"{key} must be a boolean value")


def _coerce_int(raw: object, key: str) -> int:
    """Read a count (``steps``, ``rng_seed``); ``true`` or ``2.5`` in JSON is an error."""
    if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
        raise ValueError(f"{key} must be an integer value, got {raw!r}")
    if isinstance(raw, (int, float, str)):
        return int(raw)
    raise ValueError(f"{key} must be an integer value")


def _coerce_float(raw: object, key: str) -> float:
    """Read a solver tolerance; booleans from JSON are rejected."""
    if isinstance(raw, (int, float, str)) and not isinstance(raw, bool):
        return float(raw)
    raise ValueError(f"{key} must be a float value")


def _get_val(cli_val: object, key: str, file_cfg: dict[str, object], default: object) -> object:
    """Pick a flag value: explicit flag first, then the ``--config`` file, then *default*."""
    return cli_val if cli_val is not None else file_cfg.get(key, default)


def _parse_pair(raw: str, label: str) -> tuple[str, str]:
    """Split an ``A,B`` pair; values stay strings for downstream coercion."""
    parts = [part.strip() for part in raw.split(",")]
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"{label} must use A,B format")
    return parts[0], parts[1]


def _parse_cell(raw: str) -> tuple[int, int]:
    """Parse an ``x,y`` cell coordinate."""
    x_raw, y_raw = _parse_pair(raw, "cell")
    try:
        return int(x_raw), int(y_raw)
    except ValueError as exc:
        raise ValueError("cell coordinates must be integers") from exc


def _load_file_config(parser: argparse.ArgumentParser, path: Path | None) -> dict[str, object]:
    if path is None:
        return {}
    try:
        loaded = json.loads(Path(path).read_text())
    except FileNotFoundError:
        parser.error(f"Config file not found: {path}")
    except json.JSONDecodeError as exc:
        parser.error(f"Config file is not valid JSON: {path}: {exc}")
    if not isinstance(loaded, dict):
        parser.error(f"Config file must contain a JSON object: {path}")
    return loaded


def _curve_config(args: argparse.Namespace, file_cfg: dict[str, object]) -> CurveConfig:
    return CurveConfig(
        steps=_coerce_int(_get_val(args.steps, "steps", file_cfg, CURVE_STEPS), "steps"),
        tolerance=_coerce_float(
            _get_val(args.tolerance, "tolerance", file_cfg, CURVE_TOLERANCE), "tolerance"
        ),
        use_algebraic=_coerce_bool(
            _get_val(args.algebraic, "algebraic", file_cfg, True), "algebraic"
        ),
    )


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _add_curve_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--steps", type=int, default=None)
    p.add_argument("--tolerance", type=float, default=None)
    p.add_argument(
        "--algebraic",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Try the closed-form solve before bisection",
    )


def _build_curve_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("curve", help="Print indifference-curve points as JSON")
    p.set_defaults(func=_handle_curve)
    p.add_argument("--function", type=str, default=None)
    p.add_argument("--level", type=float, required=True)
    p.add_argument("--width", type=float, required=True)
    p.add_argument("--height", type=float, required=True)
    p.add_argument("--agent", type=int, choices=[1, 2], default=1)
    _add_curve_options(p)


def _build_edgeworth_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("edgeworth", help="Render an Edgeworth box preview")
    p.set_defaults(func=_handle_edgeworth)
    p.add_argument("--u1", type=str, default=None, help="Agent 1 utility function")
    p.add_argument("--u2", type=str, default=None, help="Agent 2 utility function")
    p.add_argument("--endowment1", type=str, default=None, metavar="X,Y")
    p.add_argument("--endowment2", type=str, default=None, metavar="X,Y")
    p.add_argument("--output", type=Path, required=True)
    p.add_argument("--base-dir", type=Path, default=None)
    _add_curve_options(p)


def _build_mines_new_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("mines-new", help="Generate a random board seed")
    p.set_defaults(func=_handle_mines_new)
    p.add_argument("--preset", type=str, choices=list(PRESETS), default=None)
    p.add_argument("--rng-seed", type=int, default=None)
    p.add_argument("--base-url", type=str, default=None, help="Emit a share URL too")


def _build_mines_show_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("mines-show", help="Decode a seed, optionally play moves, and show it")
    p.set_defaults(func=_handle_mines_show)
    source = p.add_mutually_exclusive_group(required=True)
    source.add_argument("--seed", type=str, default=None)
    source.add_argument("--url", type=str, default=None)
    p.add_argument("--reveal", action="append", default=[], metavar="X,Y")
    p.add_argument("--flag", action="append", default=[], metavar="X,Y")
    p.add_argument(
        "--reveal-all",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Show the whole layout (default: only when no moves are given)",
    )
    p.add_argument("--output", type=Path, default=None, help="Render an image instead of text")
    p.add_argument("--base-dir", type=Path, default=None)


def _handle_curve(args: argparse.Namespace, file_cfg: dict[str, object]) -> None:
    function = str(_get_val(args.function, "function", file_cfg, DEFAULT_UTILITY_FUNCTION))
    points = sample_indifference_curve(
        function,
        args.level,
        BoxDimensions(width=args.width, height=args.height),
        is_agent2=args.agent == 2,
        config=_curve_config(args, file_cfg),
    )
    payload = {
        "function": function,
        "level": args.level,
        "agent": args.agent,
        "drawable": curve_is_drawable(points),
        "points": [[x, y] for x, y in points],
    }
    print(json.dumps(payload, indent=2))


def _agent_from_args(function_raw: object, endowment_raw: object, key: str) -> Agent:
    endowment = (5.0, 5.0)
    if endowment_raw is not None:
        endowment = _parse_pair(str(endowment_raw), key)  # type: ignore[assignment]
    return Agent(utility_function=str(function_raw), endowment=endowment)


def _handle_edgeworth(args: argparse.Namespace, file_cfg: dict[str, object]) -> None:
    box = EdgeworthBox(
        agent1=_agent_from_args(
            _get_val(args.u1, "u1", file_cfg, DEFAULT_UTILITY_FUNCTION),
            _get_val(args.endowment1, "endowment1", file_cfg, None),
            "endowment1",
        ),
        agent2=_agent_from_args(
            _get_val(args.u2, "u2", file_cfg, DEFAULT_UTILITY_FUNCTION),
            _get_val(args.endowment2, "endowment2", file_cfg, None),
            "endowment2",
        ),
    )
    output = render_edgeworth_box(
        box,
        args.output,
        config=_curve_config(args, file_cfg),
        base_dir=args.base_dir,
        theme=get_theme(args.theme),
    )
    print(output)


def _handle_mines_new(args: argparse.Namespace, file_cfg: dict[str, object]) -> None:
    preset = str(_get_val(args.preset, "preset", file_cfg, DEFAULT_PRESET))
    rng_seed = _get_val(args.rng_seed, "rng_seed", file_cfg, None)
    rng = Random(_coerce_int(rng_seed, "rng_seed")) if rng_seed is not None else Random()
    seed = generate_random_seed(preset, rng)
    payload: dict[str, object] = {"preset": preset, "seed": encode_seed(seed)}
    base_url = _get_val(args.base_url, "base_url", file_cfg, None)
    if base_url is not None:
        payload["url"] = seed_url(str(base_url), seed)
    print(json.dumps(payload, indent=2))


def _handle_mines_show(args: argparse.Namespace, file_cfg: dict[str, object]) -> None:
    encoded = args.seed if args.seed is not None else seed_from_url(args.url)
    game = MinesweeperGame.from_encoded(encoded)
    for raw in args.flag:
        game.toggle_flag(*_parse_cell(raw))
    for raw in args.reveal:
        game.reveal(*_parse_cell(raw))
    reveal_all = args.reveal_all
    if reveal_all is None:
        reveal_all = not (args.reveal or args.flag)

    if args.output is not None:
        output = render_board(
            game,
            args.output,
            reveal_all=reveal_all,
            base_dir=args.base_dir,
            theme=get_theme(args.theme),
        )
        print(output)
        return
    preset = game.preset or "custom"
    print(f"preset: {preset}  mines: {game.mine_count}  state: {game.state.value}")
    print(board_to_text(game, reveal_all=reveal_all))


# ---------------------------------------------------------------------------
# Main CLI
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Edgeworth box and Minesweeper tooling")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )
    parser.add_argument(
        "--theme",
        type=str,
        default="default",
        help="Theme preset name (default, paper)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    sub = parser.add_subparsers(dest="command", required=True)
    _build_curve_parser(sub)
    _build_edgeworth_parser(sub)
    _build_mines_new_parser(sub)
    _build_mines_show_parser(sub)
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint with subcommands."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    file_cfg = _load_file_config(parser, args.config)
    try:
        args.func(args, file_cfg)
    except ValueError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
