import itertools
import logging

import pytest

from stremio_ratings.common.errors import ImageDecodeFailure
from stremio_ratings.overlay.badges import (
    IMDB,
    METACRITIC,
    RT_FRESH,
    RT_ROTTEN,
    resolve_badge,
)
from stremio_ratings.overlay.layout import OverlayComposer

RATINGS = {"rotten_tomatoes": "86", "metacritic": "91", "imdb": "8.2"}


def _greedy_rows(width: int, count: int) -> int:
    item_width = width // 4
    padding_x = width // 15
    rows, x = 1, padding_x
    for placed in range(1, count + 1):
        x += item_width + padding_x
        if x + item_width > width and placed < count:
            rows += 1
            x = padding_x
    return rows


def test_layout_geometry_for_standard_poster():
    spec = OverlayComposer().compose(1000, 1500, RATINGS)
    assert spec is not None
    assert spec.width == 1000
    assert (spec.item_width, spec.item_height) == (250, 83)
    assert [(b.x, b.y) for b in spec.badges] == [(66, 60), (382, 60), (698, 60)]
    assert [b.asset for b in spec.badges] == [RT_FRESH, METACRITIC, IMDB]
    assert [b.score_text for b in spec.badges] == ["86", "91", "8.2"]
    # the cursor wraps after the third badge, so the band spans a second row
    assert spec.height == 60 + 83 + 60 + 83 + 60
    assert spec.rows == 1


def test_height_fits_poster():
    for width, height in [(300, 450), (1000, 1500), (680, 1000), (182, 268)]:
        spec = OverlayComposer().compose(width, height, RATINGS)
        assert spec.width == width
        assert spec.height <= height


def test_badges_fit_width_and_never_overlap():
    composer = OverlayComposer(resolver=lambda key, score: IMDB)
    ratings = {f"source_{i}": str(i) for i in range(9)}
    spec = composer.compose(500, 750, ratings)
    for badge in spec.badges:
        assert 0 <= badge.x
        assert badge.x + spec.item_width <= spec.width
    for first, second in itertools.combinations(spec.badges, 2):
        overlap_x = abs(first.x - second.x) < spec.item_width
        overlap_y = abs(first.y - second.y) < spec.item_height
        assert not (overlap_x and overlap_y)


@pytest.mark.parametrize("width", [100, 300, 640, 1000, 2000])
@pytest.mark.parametrize("count", [1, 2, 3, 4, 7])
def test_wraparound_row_count_matches_greedy_rule(width, count):
    composer = OverlayComposer(resolver=lambda key, score: IMDB)
    ratings = {f"source_{i}": "1" for i in range(count)}
    spec = composer.compose(width, width * 3 // 2, ratings)
    assert spec.rows == _greedy_rows(width, count)
    assert len(spec.badges) == count


def test_wrapped_rows_restart_at_left_padding():
    composer = OverlayComposer(resolver=lambda key, score: IMDB)
    spec = composer.compose(100, 150, {f"k{i}": "1" for i in range(4)})
    # 100px wide: items are 25px with 6px padding, three per row
    assert [(b.x, b.y) for b in spec.badges] == [(6, 6), (37, 6), (68, 6), (6, 20)]


def test_unrecognized_sources_are_not_rendered():
    spec = OverlayComposer().compose(
        1000, 1500, {"cinemascore": "A+", "imdb": "7.1", "letterboxd": "4"}
    )
    assert [b.asset for b in spec.badges] == [IMDB]
    assert spec.badges[0].x == 66


def test_no_recognized_badges_returns_empty_signal():
    assert OverlayComposer().compose(1000, 1500, {"cinemascore": "A+"}) is None
    assert OverlayComposer().compose(1000, 1500, {}) is None


def test_invalid_dimensions_raise():
    with pytest.raises(ImageDecodeFailure):
        OverlayComposer().compose(0, 1500, RATINGS)


@pytest.mark.parametrize(
    "score, expected",
    [("61", RT_FRESH), ("60", RT_ROTTEN), ("60.5", RT_FRESH), ("12", RT_ROTTEN)],
)
def test_rotten_tomatoes_threshold_is_exclusive(score, expected):
    assert resolve_badge("rotten_tomatoes", score) is expected


def test_unparsable_rotten_tomatoes_score_is_rotten():
    assert resolve_badge("rotten_tomatoes", "n/a") is RT_ROTTEN


def test_fixed_badges_ignore_score():
    assert resolve_badge("imdb", "1.0") is IMDB
    assert resolve_badge("metacritic", "99") is METACRITIC
    assert resolve_badge("tmdb", "80") is None


def test_layout_logs_row_count(caplog):
    composer = OverlayComposer(resolver=lambda key, score: IMDB)
    with caplog.at_level(logging.DEBUG, logger="stremio_ratings.overlay.layout"):
        spec = composer.compose(300, 450, {f"k{i}": "1" for i in range(4)})
    assert spec.rows == 2
    assert "Placed 4 badges in 2 rows" in caplog.text
