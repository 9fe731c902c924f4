import numpy as np
import pytest

from profile_view.core.colors import default_colors
from profile_view.core.flame_tree import UNKNOWN
from profile_view.core.rasterizer import flame_pixels
from profile_view.core.viewport import Rect, ZoomRegion
from profile_view.ui.FlameRenderer import FlameRenderer, to_qimage


@pytest.fixture()
def image(nested_tree):
    return flame_pixels(nested_tree, default_colors).for_display()


@pytest.fixture()
def renderer(qapp, image):
    renderer = FlameRenderer(image, font_size=12)
    # 宽 2 倍、高 40 倍的整数缩放
    renderer.resize(200, 120)
    return renderer


@pytest.fixture()
def zoom(image):
    return ZoomRegion(Rect(0, 0, image.width, image.height))


def test_to_qimage_keeps_argb_values(qapp):
    pixels = np.array([[0xFFFF0000, 0xFF00FF00], [0xFF0000FF, 0xFF123456]], dtype=np.uint32)
    qimage = to_qimage(pixels)
    assert (qimage.width(), qimage.height()) == (2, 2)
    assert qimage.pixel(0, 0) == 0xFFFF0000
    assert qimage.pixel(1, 1) == 0xFF123456


def test_redraw_uses_nearest_neighbour(renderer, zoom, image):
    renderer.redraw(zoom)
    surface = renderer.surface
    # 屏幕 (0..1, 0..39) 对应图像像素 (0, 0)
    expected = int(image.pixels[0, 0])
    assert surface.pixel(0, 0) == expected
    assert surface.pixel(1, 39) == expected
    assert surface.pixel(199, 119) == int(image.pixels[-1, -1])


def test_zoomed_redraw_shows_current_subrect(renderer, zoom, image):
    zoom.set_current(Rect(0, 2, 100, 3))
    renderer.redraw(zoom)
    # 只显示最底行（最外层帧）
    expected = int(image.pixels[2, 0])
    assert renderer.surface.pixel(0, 0) == expected
    assert renderer.surface.pixel(199, 119) == expected


def test_hover_on_unknown_draws_nothing(renderer, zoom):
    renderer.redraw(zoom)
    dirty = renderer.hover(zoom, (5.0, 0.5), UNKNOWN)
    assert dirty.isEmpty()
    assert renderer.damage.isEmpty()


def test_damage_is_repaired_before_next_label(renderer, zoom, image):
    renderer.redraw(zoom)
    clean = renderer.surface.copy()

    # 左上方的标签（左对齐）
    first_frame = image.tags[2, 2]
    renderer.hover(zoom, (5.0, 0.5), first_frame)
    first_damage = renderer.damage
    assert not first_damage.isEmpty()

    # 右下方的标签（右对齐）
    second_frame = image.tags[0, 95]
    renderer.hover(zoom, (95.0, 2.5), second_frame)
    second_damage = renderer.damage
    assert not second_damage.isEmpty()
    assert not first_damage.intersects(second_damage)

    assert renderer.surface.copy(first_damage) == clean.copy(first_damage)


def test_label_alignment_follows_view_thirds(renderer, zoom):
    text = "label"
    left = renderer.label_rect(zoom, (10.0, 1.0), text)
    center = renderer.label_rect(zoom, (50.0, 1.0), text)
    right = renderer.label_rect(zoom, (90.0, 1.0), text)

    assert left.left() == pytest.approx(20.0)
    assert center.center().x() == pytest.approx(100.0)
    assert right.right() == pytest.approx(180.0)
