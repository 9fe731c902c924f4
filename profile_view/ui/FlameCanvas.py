from PySide6.QtWidgets import QWidget
from PySide6.QtGui import QPainter, QPen, QBrush, QColor
from PySide6.QtCore import Qt, Signal, QRectF
from typing import Optional
import logging

from ..core.flame_tree import FrameTag, is_known
from ..core.gestures import (
    Button, Modifier, GestureConfig, GestureController, GestureOutcome,
    PointerPress, PointerRelease, PointerMotion, Scroll, FocusLost, Click
)
from ..core.hit_test import HitTester
from ..core.rasterizer import FlameImage
from ..core.viewport import Rect, ZoomRegion
from ..config.interaction import INTERACTION_CONFIG
from ..config.style import COLORS
from .FlameRenderer import FlameRenderer

logger = logging.getLogger(__name__)

_BUTTONS = {
    Qt.LeftButton: Button.LEFT,
    Qt.MiddleButton: Button.MIDDLE,
    Qt.RightButton: Button.RIGHT,
}

_MODIFIERS = (
    (Qt.ShiftModifier, Modifier.SHIFT),
    (Qt.ControlModifier, Modifier.CONTROL),
    (Qt.AltModifier, Modifier.ALT),
    (Qt.MetaModifier, Modifier.META),
)


def to_button(button) -> Button:
    return _BUTTONS.get(button, Button.OTHER)


def to_modifiers(modifiers) -> Modifier:
    result = Modifier.NONE
    for qt_mod, mod in _MODIFIERS:
        if modifiers & qt_mod:
            result |= mod
    return result


class FlameCanvas(QWidget):
    """火焰图画布：缩放、平移、悬停提示和点击定位"""

    frame_located = Signal(str, str, int)   # 左键点击: 文件, 函数, 行号
    edit_requested = Signal(str, int)       # 右键点击: 文件, 行号
    view_changed = Signal(object)           # 当前视图矩形

    def __init__(self, image: FlameImage, font_color=None, font_size: Optional[int] = None,
                 config: Optional[GestureConfig] = None, parent=None):
        super().__init__(parent)
        self.image = image
        self.zoom = ZoomRegion(Rect(0, 0, image.width, image.height))
        self.hit_tester = HitTester(image.tags)
        self.config = config or GestureConfig.from_dict(INTERACTION_CONFIG)
        self.controller = GestureController(self.zoom, self.config)
        self.renderer = FlameRenderer(image, font_color=font_color, font_size=font_size)
        self._selection: Optional[Rect] = None

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setMinimumSize(100, 60)
        self.renderer.resize(self.width(), self.height())
        self.renderer.redraw(self.zoom)

    def _size(self):
        return self.width(), self.height()

    @property
    def selection(self) -> Optional[Rect]:
        """框选中的临时矩形（用户坐标）"""
        return self._selection

    def reset_view(self):
        """恢复到完整视图"""
        self.zoom.reset()
        self._refresh()

    def _refresh(self):
        self.renderer.redraw(self.zoom)
        self.view_changed.emit(self.zoom.current)
        self.update()

    def dispatch(self, event) -> GestureOutcome:
        """将输入事件交给手势控制器，并处理结果"""
        outcome = self.controller.dispatch(event, self._size())
        self._selection = outcome.selection
        if outcome.view_changed:
            self._refresh()
        if outcome.click is not None:
            self._on_click(outcome.click)
        self.update()
        return outcome

    def hover(self, pos) -> FrameTag:
        """在屏幕位置 pos 处显示帧信息"""
        xu, yu = self.zoom.to_user(self._size(), pos)
        frame = self.hit_tester.frame_at(xu, yu)
        dirty = self.renderer.hover(self.zoom, (xu, yu), frame)
        if not dirty.isEmpty():
            self.update(dirty)
        return frame

    def frame_at(self, pos) -> FrameTag:
        """屏幕位置对应的帧"""
        return self.hit_tester.frame_at(*self.zoom.to_user(self._size(), pos))

    def _on_click(self, click: Click):
        """左键打印位置，右键在编辑器中打开"""
        frame = self.hit_tester.frame_at(*click.pos)
        if not is_known(frame):
            return
        if click.button == self.config.secondary_button:
            self.edit_requested.emit(frame.file, frame.line)
        else:
            self.frame_located.emit(frame.file, frame.func, frame.line)

    # ---- Qt 事件 ----

    def resizeEvent(self, event):
        """处理窗口大小变化"""
        super().resizeEvent(event)
        self.renderer.resize(self.width(), self.height())
        self.renderer.redraw(self.zoom)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.drawImage(0, 0, self.renderer.surface)

        if self._selection is not None:
            size = self._size()
            x0, y0 = self.zoom.to_screen(size, (self._selection.x0, self._selection.y0))
            x1, y1 = self.zoom.to_screen(size, (self._selection.x1, self._selection.y1))
            painter.setPen(QPen(QColor(COLORS["selection"]), 1, Qt.DashLine))
            painter.setBrush(QBrush(QColor(COLORS["selection_fill"])))
            painter.drawRect(QRectF(x0, y0, x1 - x0, y1 - y0))
        painter.end()

    def mousePressEvent(self, event):
        """处理鼠标按下事件"""
        pos = event.position()
        self.dispatch(PointerPress((pos.x(), pos.y()), to_button(event.button()),
                                   to_modifiers(event.modifiers())))
        event.accept()

    def mouseReleaseEvent(self, event):
        """处理鼠标释放事件"""
        pos = event.position()
        self.dispatch(PointerRelease((pos.x(), pos.y()), to_button(event.button()),
                                     to_modifiers(event.modifiers())))
        event.accept()

    def mouseMoveEvent(self, event):
        """处理鼠标移动事件"""
        pos = (event.position().x(), event.position().y())
        self.dispatch(PointerMotion(pos, to_modifiers(event.modifiers())))
        self.hover(pos)
        event.accept()

    def wheelEvent(self, event):
        """处理滚轮事件"""
        pos = event.position()
        delta = event.angleDelta()
        self.dispatch(Scroll((pos.x(), pos.y()), delta.x(), delta.y(),
                             to_modifiers(event.modifiers())))
        event.accept()

    def focusOutEvent(self, event):
        """失去焦点时取消进行中的手势"""
        self.dispatch(FocusLost())
        super().focusOutEvent(event)
