"""
视口模型：用户坐标（1单位 = 完整图像的1像素）与屏幕像素之间的映射
"""

import logging
import math
import threading
from typing import NamedTuple, Tuple

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
Size = Tuple[float, float]


class Rect(NamedTuple):
    """轴对齐矩形 [x0, x1] x [y0, y1]"""
    x0: float
    y0: float
    x1: float
    y1: float

    @staticmethod
    def from_corners(a: Point, b: Point) -> 'Rect':
        return Rect(min(a[0], b[0]), min(a[1], b[1]), max(a[0], b[0]), max(a[1], b[1]))

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    @property
    def center(self) -> Point:
        return ((self.x0 + self.x1) / 2, (self.y0 + self.y1) / 2)

    def is_degenerate(self) -> bool:
        # NaN 也视为退化
        return not (self.width > 0 and self.height > 0)

    def intersect(self, other: 'Rect') -> 'Rect':
        return Rect(max(self.x0, other.x0), max(self.y0, other.y0),
                    min(self.x1, other.x1), min(self.y1, other.y1))

    def translate(self, dx: float, dy: float) -> 'Rect':
        return Rect(self.x0 + dx, self.y0 + dy, self.x1 + dx, self.y1 + dy)

    def contains(self, other: 'Rect') -> bool:
        return (self.x0 <= other.x0 and self.y0 <= other.y0
                and other.x1 <= self.x1 and other.y1 <= self.y1)


def _slide_into(lo: float, hi: float, full_lo: float, full_hi: float) -> Tuple[float, float]:
    """保持区间长度，把区间移回完整范围内"""
    if hi - lo >= full_hi - full_lo:
        return full_lo, full_hi
    if lo < full_lo:
        return full_lo, full_lo + (hi - lo)
    if hi > full_hi:
        return full_hi - (hi - lo), full_hi
    return lo, hi


class ZoomRegion:
    """缩放区域：完整范围 full 与当前可见范围 current

    current 只能通过 set_current / zoom_at / pan_by / reset 修改，
    始终位于 full 之内且宽高为正。
    """

    def __init__(self, full: Rect):
        full = Rect(*full)
        if full.is_degenerate():
            raise ValueError(f"视口范围必须为正: {full}")
        self._full = full
        self._current = full
        self._lock = threading.RLock()

    @property
    def full(self) -> Rect:
        return self._full

    @property
    def current(self) -> Rect:
        return self._current

    def set_current(self, rect: Rect) -> bool:
        """设置当前视图，先与完整范围求交；结果退化时不做任何修改"""
        clipped = Rect(*rect).intersect(self._full)
        if clipped.is_degenerate():
            return False
        with self._lock:
            self._current = clipped
        logger.debug("current view -> %s", clipped)
        return True

    def zoom_at(self, center: Point, factor: float) -> bool:
        """以 center 为锚点缩放，factor < 1 放大，> 1 缩小"""
        if not (math.isfinite(factor) and factor > 0):
            return False
        cx, cy = center
        if not (math.isfinite(cx) and math.isfinite(cy)):
            return False
        with self._lock:
            cur = self._current
            rect = Rect(cx + (cur.x0 - cx) * factor, cy + (cur.y0 - cy) * factor,
                        cx + (cur.x1 - cx) * factor, cy + (cur.y1 - cy) * factor)
            return self.set_current(rect)

    def pan_by(self, dx: float, dy: float) -> bool:
        """平移当前视图（用户单位），保持大小并限制在完整范围内"""
        if not (math.isfinite(dx) and math.isfinite(dy)):
            return False
        full = self._full
        with self._lock:
            cur = self._current.translate(dx, dy)
            x0, x1 = _slide_into(cur.x0, cur.x1, full.x0, full.x1)
            y0, y1 = _slide_into(cur.y0, cur.y1, full.y0, full.y1)
            moved = Rect(x0, y0, x1, y1)
            # 极小视图加上大位移时可能因浮点精度退化
            if moved.is_degenerate() or moved == self._current:
                return False
            self._current = moved
        return True

    def reset(self):
        with self._lock:
            self._current = self._full

    def scale(self, size: Size) -> Tuple[float, float]:
        """每个屏幕像素对应的用户单位"""
        cur = self._current
        return cur.width / max(size[0], 1), cur.height / max(size[1], 1)

    def to_screen(self, size: Size, point: Point) -> Point:
        """用户坐标 -> 屏幕坐标（current 映射到整个控件）"""
        cur = self._current
        w, h = size
        return ((point[0] - cur.x0) / cur.width * w,
                (point[1] - cur.y0) / cur.height * h)

    def to_user(self, size: Size, point: Point) -> Point:
        """屏幕坐标 -> 用户坐标"""
        cur = self._current
        sx, sy = self.scale(size)
        return cur.x0 + point[0] * sx, cur.y0 + point[1] * sy
