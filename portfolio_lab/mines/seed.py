"""Board seeds: the serialisable mine layout carried in share URLs.

A seed is ``{"width": W, "height": H, "mines": [[row, col], ...]}`` as
compact JSON, Base64-encoded. The encoding matches
``btoa(JSON.stringify(seed))`` byte for byte so previously shared links keep
working.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from random import Random
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from portfolio_lab.config.constants import DEFAULT_PRESET, MAX_BOARD_CELLS, SEED_QUERY_PARAM
from portfolio_lab.config.types import PRESETS, BoardPreset

logger = logging.getLogger(__name__)

MinePosition = tuple[int, int]  # (row, col)


class SeedDecodeError(ValueError):
    """Raised when a seed string is not valid Base64 JSON of the expected shape."""


def _coerce_int(raw: object, key: str) -> int:
    """Coerce a decoded JSON value to int; rejects booleans and fractional floats."""
    if isinstance(raw, bool):
        raise SeedDecodeError(f"{key} must be an integer value")
    if isinstance(raw, float):
        if not raw.is_integer():
            raise SeedDecodeError(f"{key} must be an integer value, got {raw!r}")
        return int(raw)
    if isinstance(raw, int):
        return raw
    raise SeedDecodeError(f"{key} must be an integer value")


@dataclass(frozen=True)
class MineSeed:
    """Board dimensions plus mine positions as (row, col) pairs.

    Positions are kept exactly as given, including duplicates or positions
    outside the board; board construction ignores the latter.
    """

    width: int
    height: int
    mines: tuple[MinePosition, ...] = ()

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError("seed dimensions must be >= 1x1")
        object.__setattr__(
            self, "mines", tuple((int(row), int(col)) for row, col in self.mines)
        )

    @property
    def mine_count(self) -> int:
        return len(self.mines)

    def to_payload(self) -> dict[str, object]:
        return {
            "width": self.width,
            "height": self.height,
            "mines": [[row, col] for row, col in self.mines],
        }

    @classmethod
    def from_payload(cls, payload: object) -> MineSeed:
        """Validate a decoded JSON object and build a seed from it."""
        if not isinstance(payload, dict):
            raise SeedDecodeError("seed payload must be a JSON object")
        missing = [key for key in ("width", "height", "mines") if key not in payload]
        if missing:
            raise SeedDecodeError(f"seed payload missing fields: {', '.join(missing)}")
        width = _coerce_int(payload["width"], "width")
        height = _coerce_int(payload["height"], "height")
        if width < 1 or height < 1:
            raise SeedDecodeError("seed dimensions must be >= 1x1")
        if width * height > MAX_BOARD_CELLS:
            raise SeedDecodeError(
                f"seed board {width}x{height} exceeds {MAX_BOARD_CELLS} cells"
            )
        raw_mines = payload["mines"]
        if not isinstance(raw_mines, list):
            raise SeedDecodeError("mines must be a list")
        mines: list[MinePosition] = []
        for entry in raw_mines:
            if not isinstance(entry, list) or len(entry) != 2:
                raise SeedDecodeError("each mine must be a [row, col] pair")
            mines.append((_coerce_int(entry[0], "mine row"), _coerce_int(entry[1], "mine col")))
        return cls(width=width, height=height, mines=tuple(mines))


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


def encode_seed(seed: MineSeed) -> str:
    """Serialise *seed* to compact JSON and Base64-encode it."""
    text = json.dumps(seed.to_payload(), separators=(",", ":"))
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_seed(encoded: str) -> MineSeed:
    """Inverse of :func:`encode_seed`.

    Raises :exc:`SeedDecodeError` for malformed Base64, invalid JSON, or a
    payload of the wrong shape.
    """
    # Query-string decoding turns "+" into " "
    cleaned = encoded.strip().replace(" ", "+")
    cleaned += "=" * (-len(cleaned) % 4)
    try:
        raw = base64.b64decode(cleaned, validate=True)
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SeedDecodeError(f"malformed seed: {exc}") from exc
    return MineSeed.from_payload(payload)


# ---------------------------------------------------------------------------
# Presets and generation
# ---------------------------------------------------------------------------


def resolve_preset(name: str) -> BoardPreset:
    """Look up a preset by name."""
    try:
        return PRESETS[name]
    except KeyError as exc:
        valid = ", ".join(PRESETS)
        raise ValueError(f"preset must be one of {valid}") from exc


def detect_preset(seed: MineSeed) -> str | None:
    """Return the preset name matching the seed's size and mine count, if any."""
    for name, preset in PRESETS.items():
        if (preset.width, preset.height, preset.mines) == (
            seed.width,
            seed.height,
            seed.mine_count,
        ):
            return name
    return None


def generate_random_seed(
    preset: str | BoardPreset = DEFAULT_PRESET, rng: Random | None = None
) -> MineSeed:
    """Place exactly ``preset.mines`` distinct mines uniformly at random.

    All positions are enumerated row-major and Fisher-Yates shuffled; the
    first ``preset.mines`` become mines. There is no first-click safety.
    """
    config = resolve_preset(preset) if isinstance(preset, str) else preset
    rng = rng or Random()
    positions = [(row, col) for row in range(config.height) for col in range(config.width)]
    for i in range(len(positions) - 1, 0, -1):
        j = rng.randint(0, i)
        positions[i], positions[j] = positions[j], positions[i]
    return MineSeed(
        width=config.width,
        height=config.height,
        mines=tuple(positions[: config.mines]),
    )


def load_seed(encoded: str | None, rng: Random | None = None) -> MineSeed:
    """Decode *encoded*, or fall back to a fresh default-preset board.

    A missing or malformed seed never raises; a malformed one is logged.
    """
    if encoded:
        try:
            return decode_seed(encoded)
        except SeedDecodeError as exc:
            logger.warning("Invalid seed, generating a fresh %s board: %s", DEFAULT_PRESET, exc)
    return generate_random_seed(DEFAULT_PRESET, rng)


# ---------------------------------------------------------------------------
# Share URLs
# ---------------------------------------------------------------------------


def seed_url(base_url: str, seed: MineSeed) -> str:
    """Return *base_url* with its ``seed`` query parameter set to *seed*."""
    parts = urlsplit(base_url)
    query = {
        key: values
        for key, values in parse_qs(parts.query, keep_blank_values=True).items()
        if key != SEED_QUERY_PARAM
    }
    query[SEED_QUERY_PARAM] = [encode_seed(seed)]
    return urlunsplit(parts._replace(query=urlencode(query, doseq=True)))


def seed_from_url(url: str) -> str | None:
    """Extract the raw encoded seed from a share URL, if present."""
    values = parse_qs(urlsplit(url).query).get(SEED_QUERY_PARAM)
    return values[0] if values else None
