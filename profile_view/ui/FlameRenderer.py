from PySide6.QtGui import QImage, QPainter, QColor, QFont, QFontMetrics
from PySide6.QtCore import QRect, QRectF, Qt
from typing import Optional
import numpy as np

from ..core.flame_tree import FrameTag, is_known
from ..core.hit_test import frame_label
from ..core.rasterizer import FlameImage
from ..core.viewport import Point, ZoomRegion
from ..config.style import COLORS, FONTS


def to_qimage(pixels: np.ndarray) -> QImage:
    """将 uint32 ARGB 数组转换为 QImage（复制数据）"""
    pixels = np.ascontiguousarray(pixels, dtype=np.uint32)
    height, width = pixels.shape
    image = QImage(pixels.tobytes(), width, height, width * 4, QImage.Format_ARGB32)
    return image.copy()


class FlameRenderer:
    """绘制当前视图到后台缓冲区，并负责悬停标签的擦除与重绘

    标签直接画在缓冲区上，下一次悬停前要先用原图把上次的标签区域补回去。
    """

    def __init__(self, image: FlameImage, font_color=None, font_size: Optional[int] = None):
        self.image = to_qimage(image.pixels)
        self.font_color = QColor(font_color if font_color is not None else COLORS["font"])
        self.font = QFont(FONTS["label"])
        self.font.setPixelSize(font_size or FONTS["size"])
        self.margin = FONTS["label_margin"]
        self.surface = QImage(1, 1, QImage.Format_ARGB32_Premultiplied)
        self._damage = QRect()

    @property
    def size(self):
        return self.surface.width(), self.surface.height()

    @property
    def damage(self) -> QRect:
        """上一次标签占用的区域（屏幕坐标）"""
        return QRect(self._damage)

    def resize(self, width: int, height: int):
        self.surface = QImage(max(width, 1), max(height, 1), QImage.Format_ARGB32_Premultiplied)
        self._damage = QRect()

    def _blit(self, painter: QPainter, zoom: ZoomRegion):
        cur = zoom.current
        width, height = self.size
        # 最近邻采样，放大后帧边界保持清晰
        painter.setRenderHint(QPainter.SmoothPixmapTransform, False)
        painter.drawImage(
            QRectF(0, 0, width, height),
            self.image,
            QRectF(cur.x0, cur.y0, cur.width, cur.height),
        )

    def redraw(self, zoom: ZoomRegion):
        """重绘整个可见区域"""
        painter = QPainter(self.surface)
        self._blit(painter, zoom)
        painter.end()
        self._damage = QRect()

    def repair(self, zoom: ZoomRegion) -> bool:
        """用原图覆盖上次标签所在区域"""
        if self._damage.isEmpty():
            return False
        painter = QPainter(self.surface)
        painter.setClipRect(self._damage)
        self._blit(painter, zoom)
        painter.end()
        self._damage = QRect()
        return True

    def label_rect(self, zoom: ZoomRegion, pos: Point, text: str) -> QRectF:
        """计算标签位置：按指针在当前视图水平三等分中的位置选择对齐方式"""
        metrics = QFontMetrics(self.font)
        text_width = max(metrics.horizontalAdvance(text), metrics.boundingRect(text).width())
        text_height = metrics.height()

        sx, sy = zoom.to_screen(self.size, pos)
        cur = zoom.current
        xu = pos[0]
        if xu < (2 * cur.x0 + cur.x1) / 3:
            left = sx
        elif xu < (cur.x0 + 2 * cur.x1) / 3:
            left = sx - text_width / 2
        else:
            left = sx - text_width
        return QRectF(left, sy - text_height / 2, text_width, text_height)

    def hover(self, zoom: ZoomRegion, pos: Point, frame: FrameTag) -> QRect:
        """指针移动：先修复上次的标签区域，再绘制新标签

        Returns:
            QRect: 需要刷新到屏幕的区域
        """
        dirty = QRect(self._damage)
        self.repair(zoom)

        if is_known(frame):
            text = frame_label(frame)
            rect = self.label_rect(zoom, pos, text)

            painter = QPainter(self.surface)
            painter.setFont(self.font)
            painter.setPen(self.font_color)
            painter.drawText(rect, Qt.AlignLeft | Qt.AlignVCenter, text)
            painter.end()

            m = self.margin
            self._damage = rect.toAlignedRect().adjusted(-m, -m, m, m).intersected(self.surface.rect())
            dirty = dirty.united(self._damage)

        return dirty
