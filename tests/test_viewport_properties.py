import pytest

hypothesis = pytest.importorskip("hypothesis", reason="hypothesis is a test optional dependency")
from hypothesis import given, strategies as st  # type: ignore

from profile_view.core.viewport import Rect, ZoomRegion

FULL = Rect(0, 0, 800, 600)

coord = st.floats(-2000, 2000, allow_nan=False)

operation = st.one_of(
    st.tuples(st.just("zoom"), st.tuples(coord, coord), st.floats(0.01, 20)),
    st.tuples(st.just("pan"), coord, coord),
    st.tuples(st.just("set"), st.tuples(coord, coord), st.tuples(coord, coord)),
)


@given(st.lists(operation, max_size=30))
def test_current_stays_inside_full(ops):
    zoom = ZoomRegion(FULL)
    for op in ops:
        if op[0] == "zoom":
            zoom.zoom_at(op[1], op[2])
        elif op[0] == "pan":
            zoom.pan_by(op[1], op[2])
        else:
            zoom.set_current(Rect.from_corners(op[1], op[2]))
        cur = zoom.current
        assert cur.width > 0 and cur.height > 0
        assert FULL.contains(cur)


@given(st.tuples(st.floats(1, 799), st.floats(1, 599)), st.floats(0.05, 1.0))
def test_zoom_in_anchors_center(center, factor):
    zoom = ZoomRegion(FULL)
    zoom.set_current(Rect(100, 100, 700, 500))
    size = (640, 480)
    if not (100 <= center[0] <= 700 and 100 <= center[1] <= 500):
        return
    before = zoom.to_screen(size, center)
    zoom.zoom_at(center, factor)
    assert zoom.to_screen(size, center) == pytest.approx(before, abs=1e-6)
