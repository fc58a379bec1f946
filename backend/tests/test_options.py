from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from pwncmap.config.defaults import DEFAULT_NEGATIVE, DEFAULT_POSITIVE
from pwncmap.models.errors import (
    ColorSpecError,
    InvalidArgumentError,
    LabelError,
    LevelError,
    LoginessError,
    RangeError,
)
from pwncmap.services.options import keyword_tokens, parse_call, resolve_options


def test_resolves_full_option_list() -> None:
    options = resolve_options(["level", 20, "colorP", [0.6, 0.4, 0.3], "log", "off"])

    assert options.levels == 20
    assert options.level_count == 20
    assert options.color_p == (0.6, 0.4, 0.3)
    assert options.positive == (0.6, 0.4, 0.3)
    assert options.negative == DEFAULT_NEGATIVE
    assert options.log is True
    assert options.loginess == 1.0
    assert options.off is True
    assert options.full is False


def test_optional_values_for_log_and_full() -> None:
    options = resolve_options(["log", 1.2, "full"])
    assert options.loginess == 1.2
    assert options.full is True
    assert options.white_point is None

    options = resolve_options(["full", 0.5, "log", -1])
    assert options.white_point == 0.5
    assert options.loginess == -1.0


def test_one_element_arrays_count_as_scalars() -> None:
    options = resolve_options(["full", np.array([0.5]), "log", np.array([1.2]), "level", np.array([20])])
    assert options.white_point == 0.5
    assert options.loginess == 1.2
    assert options.levels == 20


def test_color_rows_accept_arrays() -> None:
    options = resolve_options(["colorN", np.array([[0.1, 0.2, 0.3]]), "colorW", (0.9, 0.9, 0.9)])
    assert options.negative == (0.1, 0.2, 0.3)
    assert options.color_w == (0.9, 0.9, 0.9)


def test_label_value_may_be_a_keyword() -> None:
    options = resolve_options(["label", "level"])
    assert options.label == "level"
    assert options.levels == 128

    options = resolve_options(["label", "off", "off"])
    assert options.label == "off"
    assert options.off is True


def test_reverse_flag_swaps_defaults() -> None:
    options = resolve_options(["rev"])
    assert options.reverse is True
    assert options.positive == DEFAULT_NEGATIVE
    assert options.negative == DEFAULT_POSITIVE


def test_unknown_keyword_is_named_in_error() -> None:
    with pytest.raises(InvalidArgumentError, match="levle"):
        resolve_options(["levle", 3])


def test_leading_numeric_token_is_invalid() -> None:
    with pytest.raises(InvalidArgumentError, match="5"):
        resolve_options([5])


@pytest.mark.parametrize(
    "tokens",
    [
        ["level", 20, 30],
        ["colorP", [0.6, 0.4, 0.3], 5],
        ["log", 2, [0.1, 0.2, 0.3]],
    ],
)
def test_adjacent_numeric_tokens_are_ambiguous(tokens: list) -> None:
    with pytest.raises(InvalidArgumentError, match="ambiguous"):
        resolve_options(tokens)


def test_stray_string_after_value_is_invalid() -> None:
    with pytest.raises(InvalidArgumentError, match="'blue'"):
        resolve_options(["level", 20, "blue"])


@pytest.mark.parametrize(
    ("tokens", "error"),
    [
        (["level"], LevelError),
        (["label"], LabelError),
        (["colorP"], ColorSpecError),
        (["colorN"], ColorSpecError),
        (["colorW"], ColorSpecError),
    ],
)
def test_missing_required_value(tokens: list, error: type[Exception]) -> None:
    with pytest.raises(error, match="must be specified"):
        resolve_options(tokens)


@pytest.mark.parametrize(
    ("tokens", "error"),
    [
        (["label", 5], LabelError),
        (["level", "label"], LevelError),
        (["colorP", "rev"], ColorSpecError),
        (["log", [1, 2]], LoginessError),
        (["full", [1, 2]], RangeError),
        (["rev", 3], InvalidArgumentError),
        (["off", [1, 2, 3]], InvalidArgumentError),
    ],
)
def test_wrong_value_types(tokens: list, error: type[Exception]) -> None:
    with pytest.raises(error):
        resolve_options(tokens)


def test_duplicate_option_keeps_first(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level("WARNING")
    options = resolve_options(["level", 10, "level", 20])

    assert options.levels == 10
    assert "Duplicate option 'level'" in caplog.text


def test_keyword_tokens_flatten_flags_and_values() -> None:
    tokens = keyword_tokens(
        {"level": 20, "rev": True, "log": True, "full": 0.5, "off": False, "label": None}
    )
    assert tokens == ["level", 20, "rev", "log", "full", 0.5]


def test_keyword_tokens_reject_unknown_names() -> None:
    with pytest.raises(InvalidArgumentError, match="colour"):
        keyword_tokens({"colour": [1, 0, 0]})


def test_parse_call_splits_leading_target() -> None:
    handle = object()
    target, low, high, tokens = parse_call((handle, -1, 2, "rev"))

    assert target is handle
    assert (low, high) == (-1, 2)
    assert tokens == ["rev"]

    target, low, high, tokens = parse_call((-1, 2))
    assert target is None
    assert tokens == []


@pytest.mark.parametrize("args", [("rev",), (1,), (1, "x"), ([1, 2], 3)])
def test_parse_call_requires_scalar_range(args: tuple) -> None:
    with pytest.raises(RangeError):
        parse_call(args)
