import numpy as np
import pytest

from palette_recolor.core_types import OriginalEntry, PaletteEntry, hex_to_rgb
from palette_recolor.errors import InvalidColourError
from palette_recolor.palette_data import (
    build_colour_cache,
    build_palette_cache,
    lightness_ranks,
    normalise_colour,
    parse_originals,
)


def test_normalise_colour_forms() -> None:
    assert normalise_colour("#FF00aa") == "#ff00aa"
    assert normalise_colour(" ff00aa ") == "#ff00aa"
    assert normalise_colour("#f0a") == "#ff00aa"
    assert normalise_colour("rgb(255, 0, 170)") == "#ff00aa"
    assert normalise_colour("rgba(1,2,3,0.5)") == "#010203"


@pytest.mark.parametrize(
    "value", ["", "none", "transparent", "#12345", "#gggggg", "rgb(256,0,0)", None, 42]
)
def test_normalise_colour_rejects(value) -> None:
    assert normalise_colour(value) is None


def test_strict_hex_to_rgb_raises() -> None:
    assert hex_to_rgb("#0a0b0c") == (10, 11, 12)
    with pytest.raises(InvalidColourError):
        hex_to_rgb("0a0b0c")
    with pytest.raises(InvalidColourError):
        hex_to_rgb("#zzzzzz")
    with pytest.raises(InvalidColourError):
        hex_to_rgb("#+1+2+3")
    with pytest.raises(InvalidColourError):
        hex_to_rgb("# 1 2 3")


def test_lightness_ranks_is_permutation_with_stable_ties() -> None:
    ranks = lightness_ranks(np.array([50.0, 10.0, 50.0, 90.0, 10.0]))
    assert sorted(ranks.tolist()) == [0, 1, 2, 3, 4]
    assert ranks.tolist() == [2, 0, 3, 4, 1]


def test_colour_cache_fields() -> None:
    samples = build_colour_cache(["#ffffff", "#000000", "#ff0000"], weights=[1, 2, 3])
    assert [s.lightness_rank for s in samples] == [2, 0, 1]
    assert [s.weight for s in samples] == [1.0, 2.0, 3.0]
    red = samples[2]
    assert red.C == pytest.approx(np.hypot(red.a, red.b))
    assert 0.0 <= red.h < 360.0


def test_palette_cache_drops_invalid_and_keeps_caller_index(capsys) -> None:
    palette = build_palette_cache(
        ["#ff0000", "nope", ("#00ff00", "Green"), {"hex": "#0000ff", "label": "Blue"}]
    )
    assert [p.index for p in palette] == [0, 2, 3]
    assert [p.label for p in palette] == [None, "Green", "Blue"]
    assert sorted(p.lightness_rank for p in palette) == [0, 1, 2]
    assert "[warn]" in capsys.readouterr().out


def test_palette_entry_objects_accepted() -> None:
    palette = build_palette_cache([PaletteEntry("#ABCDEF", "Sky")])
    assert palette[0].hex == "#abcdef"
    assert palette[0].label == "Sky"


def test_parse_originals_merges_and_defaults() -> None:
    entries = parse_originals(
        [
            "#112233",
            ("#AABBCC", 2.5, "sky"),
            {"hex": "#112233", "weight": 3, "label": "ink"},
            OriginalEntry("#445566", 4.0),
        ]
    )
    assert [e.hex for e in entries] == ["#112233", "#aabbcc", "#445566"]
    assert [e.weight for e in entries] == [4.0, 2.5, 4.0]
    assert entries[0].label == "ink"
    assert entries[1].label == "sky"


def test_parse_originals_drops_bad_weights(capsys) -> None:
    entries = parse_originals([("#000000", 0), ("#111111", -1), ("#222222", float("nan")), ("#333333", 1)])
    assert [e.hex for e in entries] == ["#333333"]
    assert capsys.readouterr().out.count("[warn]") == 3


def test_weight_override_replaces_merged_weight() -> None:
    entries = parse_originals(
        [("#101010", 1), ("#101010", 1), ("#202020", 5)], weights={"#101010": 7}
    )
    assert [(e.hex, e.weight) for e in entries] == [("#101010", 7.0), ("#202020", 5.0)]
