"""Option resolution for the positive-white-negative colorbar.

Options arrive as a flat token list in the order a caller would write them,
e.g. ``["level", 20, "colorP", [0.6, 0.4, 0.3], "log", "off"]``. The list is
resolved in a single pass: every token must either be a known keyword or the
value belonging to the keyword right before it.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

import numpy as np

from ..config.defaults import OPTION_KEYWORDS
from ..models.base import PwnOptions, is_numeric_token, is_real_scalar
from ..models.errors import (
    ColorSpecError,
    InvalidArgumentError,
    LabelError,
    LevelError,
    LoginessError,
    PwnError,
    RangeError,
)

logger = logging.getLogger(__name__)

_MISSING = object()

_FIELD_BY_KEYWORD = {
    "level": "levels",
    "label": "label",
    "colorP": "color_p",
    "colorN": "color_n",
    "colorW": "color_w",
}

_MISSING_VALUE_ERRORS: dict[str, type[PwnError]] = {
    "level": LevelError,
    "label": LabelError,
    "colorP": ColorSpecError,
    "colorN": ColorSpecError,
    "colorW": ColorSpecError,
}

_SCALAR_VALUE_ERRORS: dict[str, type[PwnError]] = {
    "log": LoginessError,
    "full": RangeError,
}


def describe_token(token: Any) -> str:
    if isinstance(token, np.ndarray):
        return repr(token.tolist())
    return repr(token)


def is_keyword(token: Any) -> bool:
    return isinstance(token, str) and token in OPTION_KEYWORDS


def _unwrap(token: Any) -> Any:
    # A one-element numeric array stands for its scalar, e.g. np.array([0.5]).
    if isinstance(token, np.ndarray) and token.size == 1 and token.ndim > 0 and token.dtype.kind in "iuf":
        return token.reshape(()).item()
    return token


def _apply(values: dict[str, Any], keyword: str, value: Any) -> None:
    if keyword in _FIELD_BY_KEYWORD:
        values[_FIELD_BY_KEYWORD[keyword]] = value
    elif keyword == "log":
        values["log"] = True
        if value is not _MISSING:
            values["loginess"] = value
    elif keyword == "full":
        values["full"] = True
        if value is not _MISSING:
            values["white_point"] = value
    elif keyword == "rev":
        values["reverse"] = True
    elif keyword == "off":
        values["off"] = True
    else:
        raise InvalidArgumentError(f"invalid input argument {keyword!r}")


def resolve_options(tokens: Sequence[Any], *, target: Any = None) -> PwnOptions:
    """Resolve an option token list into validated :class:`PwnOptions`."""
    tokens = [_unwrap(token) for token in tokens]
    values: dict[str, Any] = {}
    seen: set[str] = set()
    count = len(tokens)
    prev_numeric = False
    idx = 0
    while idx < count:
        token = tokens[idx]
        if not is_keyword(token):
            if prev_numeric and is_numeric_token(token):
                raise InvalidArgumentError(
                    f"ambiguous input argument {describe_token(token)}: "
                    "numeric values must follow an option keyword"
                )
            raise InvalidArgumentError(f"invalid input argument {describe_token(token)}")

        keyword = token
        arity = OPTION_KEYWORDS[keyword]
        following = tokens[idx + 1] if idx + 1 < count else _MISSING
        value: Any = _MISSING

        if arity == "required":
            if following is _MISSING:
                raise _MISSING_VALUE_ERRORS[keyword](f"{keyword} value must be specified")
            value = following
            idx += 2
        elif arity == "optional":
            if following is not _MISSING and is_real_scalar(following):
                value = following
                idx += 2
            elif following is not _MISSING and not isinstance(following, str):
                raise _SCALAR_VALUE_ERRORS[keyword](
                    f"{keyword} value must be a scalar when specified, got {describe_token(following)}"
                )
            else:
                idx += 1
        else:
            if following is not _MISSING and is_numeric_token(following):
                raise InvalidArgumentError(
                    f"invalid input argument {describe_token(following)} after {keyword!r}"
                )
            idx += 1

        prev_numeric = value is not _MISSING and is_numeric_token(value)
        if keyword in seen:
            logger.warning("Duplicate option %r ignored; the first occurrence wins", keyword)
            continue
        seen.add(keyword)
        _apply(values, keyword, value)

    return PwnOptions(target=target, **values)


def keyword_tokens(keywords: Mapping[str, Any]) -> list[Any]:
    """Flatten ``level=20, rev=True, log=1.2`` style keywords into option tokens.

    Flags take ``True``/``False``; ``log`` and ``full`` also take their scalar.
    ``None`` leaves an option unset.
    """
    tokens: list[Any] = []
    for keyword, value in keywords.items():
        if keyword not in OPTION_KEYWORDS:
            raise InvalidArgumentError(f"invalid input argument {keyword!r}")
        if value is None or value is False:
            continue
        arity = OPTION_KEYWORDS[keyword]
        if arity == "none" or (arity == "optional" and value is True):
            tokens.append(keyword)
        else:
            tokens.extend([keyword, value])
    return tokens


def parse_call(args: Sequence[Any]) -> tuple[Any, Any, Any, list[Any]]:
    """Split ``(target?, cmin, cmax, *options)`` into its parts.

    A leading argument that is neither numeric nor a string is taken as the
    target handle.
    """
    remaining = list(args)
    target = None
    if remaining and not isinstance(remaining[0], (str, bytes)) and not is_numeric_token(remaining[0]):
        target = remaining.pop(0)
    if len(remaining) < 2:
        raise RangeError("specify cmin and cmax, both must be scalars")
    low, high = remaining[0], remaining[1]
    if not is_real_scalar(low) or not is_real_scalar(high):
        raise RangeError(
            f"cmin and cmax must be real scalars, got cmin={describe_token(low)} cmax={describe_token(high)}"
        )
    return target, low, high, remaining[2:]
