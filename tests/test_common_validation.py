"""Tests for shared validation helpers."""

import pytest

from stremio_ratings.common.validation import require_non_negative, require_positive


def test_require_positive_accepts_positive_int() -> None:
    assert require_positive(5, name="value") == 5


@pytest.mark.parametrize("bad", [0, -1, -100])
def test_require_positive_rejects_non_positive_int(bad: int) -> None:
    with pytest.raises(ValueError, match="value must be positive"):
        require_positive(bad, name="value")


@pytest.mark.parametrize("bad_type", [1.5, "1", None, object(), True])
def test_require_positive_enforces_int_type(bad_type: object) -> None:
    with pytest.raises(TypeError, match="value must be an int"):
        require_positive(bad_type, name="value")  # type: ignore[arg-type]


@pytest.mark.parametrize("value", [0, 1, 64])
def test_require_non_negative_accepts_zero_and_up(value: int) -> None:
    assert require_non_negative(value, name="limit") == value


def test_require_non_negative_rejects_negative() -> None:
    with pytest.raises(ValueError, match="limit must not be negative"):
        require_non_negative(-1, name="limit")
    with pytest.raises(TypeError, match="limit must be an int"):
        require_non_negative(False, name="limit")  # type: ignore[arg-type]
