"""Tests for the display helpers: colors, paths, text, labels and verbs."""

from __future__ import annotations

import re

import pytest

from flowcatalog.display.colors import (
    color_from_string,
    hsl_to_rgb,
    hue_from_string,
    ideal_text_color,
    rgb_to_hex,
    string_hash,
)
from flowcatalog.display.labels import (
    argument_input,
    param_kind,
    param_kind_color,
    param_source,
    type_color,
    type_description,
    type_label,
    visibility_color,
    visibility_label,
)
from flowcatalog.display.paths import ELLIPSIS, path_width, shorten_path
from flowcatalog.display.text import clean_markdown, collation_key, shorten_description
from flowcatalog.display.verbs import classify_verb
from flowcatalog.models import Executable, ExecutableArgument, ExecutableParameter, ParamKind, VerbType

# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------


def test_string_hash_is_djb2_xor() -> None:
    assert string_hash("") == 5381
    assert string_hash("a") == 177604
    assert 0 <= string_hash("a much longer tag name that overflows 32 bits") < 2**32


@pytest.mark.parametrize("text", ["", "db", "dev", "ci", "backend", "日本語", "🚀 launch"])
def test_color_is_deterministic_and_well_formed(text: str) -> None:
    assert 0 <= hue_from_string(text) < 360
    color = color_from_string(text)
    assert color == color_from_string(text)
    assert re.fullmatch(r"#[0-9a-f]{6}", color)


def test_hsl_to_rgb_primaries() -> None:
    assert hsl_to_rgb(0, 100, 50) == (255, 0, 0)
    assert hsl_to_rgb(120, 100, 50) == (0, 255, 0)
    assert hsl_to_rgb(240, 100, 50) == (0, 0, 255)
    assert hsl_to_rgb(0, 0, 100) == (255, 255, 255)
    assert rgb_to_hex((255, 0, 16)) == "#ff0010"


def test_ideal_text_color() -> None:
    assert ideal_text_color("#ffffff") == "#000000"
    assert ideal_text_color("#000000") == "#FFFFFF"
    assert ideal_text_color("#0000ff") == "#FFFFFF"


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


def test_shorten_path_wide_keeps_everything() -> None:
    result = shorten_path("/a/b/c/d.txt", 500)
    assert result == "/a/b/c/d.txt"
    assert result.endswith("c/d.txt")


def test_shorten_path_narrow_keeps_parent_and_last() -> None:
    result = shorten_path("/a/b/c/d.txt", 100)
    assert result == f"{ELLIPSIS}c/d.txt"
    assert shorten_path("d.txt", 100) == "d.txt"


def test_shorten_path_within_budget() -> None:
    assert shorten_path("/home/user/projects/flowcatalog/flows/build.flow", 200) == f"{ELLIPSIS}flows/build.flow"


def test_shorten_path_short_paths_untouched() -> None:
    assert shorten_path("", 500) == ""
    assert shorten_path("flows/a.flow", 500) == "flows/a.flow"


def test_shorten_path_normalizes_backslashes() -> None:
    assert shorten_path("C:\\Users\\dev\\flow.yaml", 100) == f"{ELLIPSIS}dev/flow.yaml"


def test_path_width() -> None:
    assert path_width("abc") == 24


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------


def test_clean_markdown() -> None:
    assert clean_markdown("# Title\n\nSome **bold** text") == "Title Some bold text"
    assert clean_markdown("![diagram](img.png) caption") == "caption"
    assert clean_markdown("See [the docs](https://example.com).") == "See the docs."
    assert clean_markdown(None) == ""


def test_shorten_description_cuts_at_word_boundary() -> None:
    assert shorten_description("short") == "short"
    assert shorten_description("word " * 50, 20) == "word word word word…"


def test_shorten_description_strips_trailing_punctuation() -> None:
    assert shorten_description("alpha, beta, gamma, delta, epsilon", 13) == "alpha, beta…"


def test_shorten_description_cuts_mid_word_without_late_space() -> None:
    assert shorten_description("abcdefghijklmnopqrstuvwxyz", 10) == "abcdefghij…"


def test_collation_key_is_case_insensitive() -> None:
    assert sorted(["beta", "Alpha", "gamma"], key=collation_key) == ["Alpha", "beta", "gamma"]


# ---------------------------------------------------------------------------
# Labels and verbs
# ---------------------------------------------------------------------------


def test_type_labels() -> None:
    command = Executable.model_validate({"ref": "x", "exec": {"cmd": "ls"}})
    request = Executable.model_validate({"ref": "y", "request": {"url": "https://example.com"}})
    unknown = Executable(ref="z")

    assert (type_label(command), type_color(command)) == ("Command", "blue.5")
    assert (type_label(request), type_description(request)) == ("HTTP Request", "HTTP request")
    assert type_label(unknown) == "Unknown"


def test_visibility_labels() -> None:
    assert visibility_label(Executable(ref="x")) == "private"
    assert visibility_color(Executable(ref="x")) == "blue.3"
    assert visibility_color(Executable(ref="x", visibility="hidden")) == "red.3"


def test_parameter_kinds() -> None:
    assert param_kind(ExecutableParameter(text="1")) is ParamKind.STATIC
    assert param_kind(ExecutableParameter(secret_ref="token")) is ParamKind.SECRET
    assert param_kind(ExecutableParameter(prompt="Name?")) is ParamKind.PROMPT
    assert param_kind(ExecutableParameter(env_file=".env")) is ParamKind.FILE
    assert param_kind(ExecutableParameter()) is ParamKind.UNKNOWN
    assert param_source(ExecutableParameter(secret_ref="token")) == "token"
    assert param_source(ExecutableParameter()) == "-"
    assert param_kind_color(ParamKind.SECRET) == "red.5"


def test_argument_input() -> None:
    assert argument_input(ExecutableArgument(pos=1)) == "position=1"
    assert argument_input(ExecutableArgument(flag="target")) == "flag=target"


@pytest.mark.parametrize(
    ("verb", "aliases", "expected"),
    [
        ("Create", (), VerbType.CREATION),
        ("zap", ("remove",), VerbType.DESTRUCTION),
        ("zap", (), VerbType.RUN),
        (None, (), VerbType.RUN),
        (" restart ", (), VerbType.RESTART),
        ("lint", (), VerbType.VALIDATION),
    ],
)
def test_classify_verb(verb, aliases, expected) -> None:
    assert classify_verb(verb, aliases) is expected
