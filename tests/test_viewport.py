import threading

import pytest

from profile_view.core.viewport import Rect, ZoomRegion

SIZE = (800, 600)


@pytest.fixture()
def zoom() -> ZoomRegion:
    return ZoomRegion(Rect(0, 0, 800, 600))


def test_zoom_at_scenario(zoom):
    assert zoom.zoom_at((400, 300), 0.5)
    assert zoom.current == pytest.approx(Rect(200, 150, 600, 450))


@pytest.mark.parametrize("center, factor", [((300, 200), 0.5), ((123.4, 456.7), 0.8), ((700, 50), 0.9)])
def test_zoom_keeps_center_on_screen(zoom, center, factor):
    before = zoom.to_screen(SIZE, center)
    zoom.zoom_at(center, factor)
    after = zoom.to_screen(SIZE, center)
    assert after == pytest.approx(before, abs=1e-6)


def test_set_current_full_is_idempotent(zoom):
    zoom.set_current(zoom.full)
    first = zoom.current
    zoom.set_current(zoom.full)
    assert zoom.current == first == zoom.full


def test_set_current_clips_to_full(zoom):
    assert zoom.set_current(Rect(-100, -50, 300, 200))
    assert zoom.current == Rect(0, 0, 300, 200)


@pytest.mark.parametrize(
    "rect",
    [Rect(900, 0, 1000, 100), Rect(10, 10, 10, 50), Rect(10, 10, 50, 10), Rect(50, 50, 10, 10)],
)
def test_degenerate_set_current_is_noop(zoom, rect):
    zoom.set_current(Rect(100, 100, 200, 200))
    assert not zoom.set_current(rect)
    assert zoom.current == Rect(100, 100, 200, 200)


def test_zoom_out_is_clamped_to_full(zoom):
    zoom.zoom_at((400, 300), 0.5)
    zoom.zoom_at((400, 300), 10)
    assert zoom.current == zoom.full


@pytest.mark.parametrize("factor", [0, -1, float("nan"), float("inf")])
def test_invalid_zoom_factor_is_ignored(zoom, factor):
    assert not zoom.zoom_at((400, 300), factor)
    assert zoom.current == zoom.full


def test_pan_keeps_size_and_stays_inside(zoom):
    zoom.set_current(Rect(200, 150, 600, 450))
    assert zoom.pan_by(50, -20)
    assert zoom.current == Rect(250, 130, 650, 430)

    zoom.pan_by(10_000, 10_000)
    assert zoom.current == Rect(400, 300, 800, 600)

    zoom.pan_by(-10_000, 0)
    assert zoom.current == Rect(0, 300, 400, 600)


def test_pan_at_full_view_does_nothing(zoom):
    assert not zoom.pan_by(30, 30)
    assert zoom.current == zoom.full


def test_screen_user_round_trip(zoom):
    zoom.set_current(Rect(100, 200, 300, 250))
    user = zoom.to_user(SIZE, (400, 300))
    assert user == pytest.approx((200, 225))
    assert zoom.to_screen(SIZE, user) == pytest.approx((400, 300))


def test_reset(zoom):
    zoom.zoom_at((10, 10), 0.25)
    zoom.reset()
    assert zoom.current == zoom.full


def test_current_has_no_setter(zoom):
    with pytest.raises(AttributeError):
        zoom.current = Rect(0, 0, 1, 1)


def test_degenerate_full_is_rejected():
    with pytest.raises(ValueError):
        ZoomRegion(Rect(0, 0, 0, 10))


def test_concurrent_pans_are_not_lost(zoom):
    zoom.set_current(Rect(0, 0, 100, 100))

    def worker():
        for _ in range(100):
            zoom.pan_by(1, 0)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert zoom.current == Rect(400, 0, 500, 100)
