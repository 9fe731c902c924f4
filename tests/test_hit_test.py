import numpy as np
import pytest

from profile_view.core.flame_tree import StackFrame, UNKNOWN
from profile_view.core.hit_test import HitTester, frame_label, frame_location
from profile_view.core.viewport import Rect, ZoomRegion

OUTER = StackFrame("/src/outer.py", "outer", 1)
INNER_L = StackFrame("/src/inner.py", "left", 2)
INNER_R = StackFrame("/src/inner.py", "right", 3)


@pytest.fixture()
def tester() -> HitTester:
    # 第0行 = 深度1（屏幕最底行），第1行 = 深度2
    tags = np.empty((2, 4), dtype=object)
    tags[0, :] = OUTER
    tags[1, :2] = INNER_L
    tags[1, 2:3] = INNER_R
    tags[1, 3:] = UNKNOWN
    return HitTester(tags)


def test_vertical_flip(tester):
    # 上半部分对应较深的一行
    assert tester.frame_at(0.5, 0.5) == INNER_L
    assert tester.frame_at(2.5, 0.5) == INNER_R
    assert tester.frame_at(3.5, 0.5) is UNKNOWN
    assert tester.frame_at(0.5, 1.5) == OUTER


@pytest.mark.parametrize(
    "pos, expected",
    [
        ((-3.0, -3.0), INNER_L),
        ((0.0, 0.0), INNER_L),
        ((100.0, 100.0), OUTER),
        ((4.0000001, 1.0), UNKNOWN),
        ((float("inf"), float("-inf")), UNKNOWN),
    ],
)
def test_out_of_range_positions_are_clamped(tester, pos, expected):
    assert tester.frame_at(*pos) == expected


def test_nan_position_is_unknown(tester):
    assert tester.frame_at(float("nan"), 1.0) is UNKNOWN


def test_same_screen_position_resolves_to_same_frame(tester):
    zoom = ZoomRegion(Rect(0, 0, 4, 2))
    zoom.set_current(Rect(1, 0, 3, 2))
    size = (200, 100)
    results = {tester.frame_at(*zoom.to_user(size, (150, 20))) for _ in range(10)}
    assert results == {INNER_R}


def test_labels():
    assert frame_label(INNER_L) == "inner.py, left: line 2"
    assert frame_location(INNER_L) == "/src/inner.py, left: line 2"
    assert frame_label(UNKNOWN) == ""
