"""Tests for board seed encoding, presets, and share URLs."""

from __future__ import annotations

import base64
import json
import logging
from random import Random

import pytest

from portfolio_lab.config.constants import MAX_BOARD_CELLS
from portfolio_lab.config.types import PRESETS, BoardPreset
from portfolio_lab.mines.seed import (
    MineSeed,
    SeedDecodeError,
    decode_seed,
    detect_preset,
    encode_seed,
    generate_random_seed,
    load_seed,
    resolve_preset,
    seed_from_url,
    seed_url,
)


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


class TestCodec:
    def test_encoding_is_base64_of_compact_json(self) -> None:
        seed = MineSeed(width=3, height=2, mines=((0, 1), (1, 2)))
        expected = _b64('{"width":3,"height":2,"mines":[[0,1],[1,2]]}')
        assert encode_seed(seed) == expected

    def test_round_trip_preserves_layout(self) -> None:
        seed = generate_random_seed("intermediate", Random(7))
        decoded = decode_seed(encode_seed(seed))
        assert decoded == seed
        assert decoded.mine_count == 40

    def test_duplicates_survive_round_trip(self) -> None:
        seed = MineSeed(width=4, height=4, mines=((1, 1), (1, 1)))
        decoded = decode_seed(encode_seed(seed))
        assert decoded.mines == ((1, 1), (1, 1))
        assert decoded.mine_count == 2

    def test_space_mangled_plus_is_restored(self) -> None:
        seed = generate_random_seed("beginner", Random(3))
        encoded = encode_seed(seed)
        assert decode_seed(encoded.replace("+", " ")) == seed

    def test_missing_padding_is_tolerated(self) -> None:
        seed = MineSeed(width=1, height=1, mines=())
        encoded = encode_seed(seed).rstrip("=")
        assert decode_seed(encoded) == seed

    def test_bad_base64_raises(self) -> None:
        with pytest.raises(SeedDecodeError):
            decode_seed("not*base64!")

    def test_bad_json_raises(self) -> None:
        with pytest.raises(SeedDecodeError):
            decode_seed(_b64("{width: 9"))

    def test_missing_fields_raise(self) -> None:
        with pytest.raises(SeedDecodeError, match="mines"):
            decode_seed(_b64(json.dumps({"width": 9, "height": 9})))

    def test_non_integer_dimensions_raise(self) -> None:
        with pytest.raises(SeedDecodeError):
            decode_seed(_b64(json.dumps({"width": 9.5, "height": 9, "mines": []})))

    def test_bad_mine_entry_raises(self) -> None:
        with pytest.raises(SeedDecodeError):
            decode_seed(_b64(json.dumps({"width": 9, "height": 9, "mines": [[1]]})))

    def test_decode_error_is_a_value_error(self) -> None:
        assert issubclass(SeedDecodeError, ValueError)


class TestPresets:
    def test_resolve_known_preset(self) -> None:
        assert resolve_preset("expert") == BoardPreset(width=30, height=16, mines=99)

    def test_resolve_unknown_preset_lists_choices(self) -> None:
        with pytest.raises(ValueError, match="beginner"):
            resolve_preset("nightmare")

    def test_detect_preset_by_size_and_count(self) -> None:
        seed = generate_random_seed("expert", Random(1))
        assert detect_preset(seed) == "expert"

    def test_detect_preset_none_for_custom(self) -> None:
        assert detect_preset(MineSeed(width=9, height=9, mines=((0, 0),))) is None

    @pytest.mark.parametrize("name", list(PRESETS))
    def test_generated_seed_has_distinct_in_bounds_mines(self, name: str) -> None:
        preset = PRESETS[name]
        seed = generate_random_seed(name, Random(42))
        assert (seed.width, seed.height) == (preset.width, preset.height)
        assert seed.mine_count == preset.mines
        assert len(set(seed.mines)) == preset.mines
        for row, col in seed.mines:
            assert 0 <= row < preset.height
            assert 0 <= col < preset.width

    def test_generation_is_reproducible_with_rng(self) -> None:
        assert generate_random_seed("beginner", Random(5)) == generate_random_seed(
            "beginner", Random(5)
        )

    def test_custom_preset_object(self) -> None:
        seed = generate_random_seed(BoardPreset(width=2, height=2, mines=4), Random(0))
        assert sorted(seed.mines) == [(0, 0), (0, 1), (1, 0), (1, 1)]


class TestLoadSeed:
    def test_valid_seed_is_decoded(self) -> None:
        seed = MineSeed(width=5, height=4, mines=((3, 4),))
        assert load_seed(encode_seed(seed)) == seed

    def test_missing_seed_generates_default(self) -> None:
        seed = load_seed(None, Random(0))
        assert detect_preset(seed) == "beginner"

    def test_invalid_seed_logs_and_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="portfolio_lab.mines.seed"):
            seed = load_seed("garbage!!", Random(0))
        assert detect_preset(seed) == "beginner"
        assert "Invalid seed" in caplog.text


class TestShareUrls:
    def test_seed_url_sets_query_param(self) -> None:
        seed = MineSeed(width=2, height=2, mines=((0, 0),))
        url = seed_url("https://example.com/games/minesweeper", seed)
        assert url.startswith("https://example.com/games/minesweeper?seed=")
        assert decode_seed(seed_from_url(url) or "") == seed

    def test_seed_url_replaces_existing_seed_and_keeps_others(self) -> None:
        seed = MineSeed(width=2, height=2, mines=((1, 1),))
        url = seed_url("https://example.com/m?seed=old&lang=en", seed)
        assert "lang=en" in url
        assert "seed=old" not in url
        assert decode_seed(seed_from_url(url) or "") == seed

    def test_seed_from_url_without_param(self) -> None:
        assert seed_from_url("https://example.com/m") is None


class TestMineSeed:
    def test_rejects_empty_board(self) -> None:
        with pytest.raises(ValueError):
            MineSeed(width=0, height=9)

    def test_mines_normalised_to_int_tuples(self) -> None:
        seed = MineSeed(width=3, height=3, mines=[[1, 2]])  # type: ignore[arg-type]
        assert seed.mines == ((1, 2),)


class TestBoardSizeCap:
    def test_oversized_board_is_rejected(self) -> None:
        payload = {"width": 10**6, "height": 10**6, "mines": []}
        with pytest.raises(SeedDecodeError, match="exceeds"):
            decode_seed(_b64(json.dumps(payload)))

    def test_board_at_cap_is_accepted(self) -> None:
        seed = MineSeed(width=100, height=MAX_BOARD_CELLS // 100)
        assert decode_seed(encode_seed(seed)) == seed

    def test_oversized_board_self_heals(self) -> None:
        payload = {"width": 10**6, "height": 10**6, "mines": []}
        seed = load_seed(_b64(json.dumps(payload)), Random(0))
        assert detect_preset(seed) == "beginner"
