"""
交互控制：框选缩放、拖动平移、滚轮缩放、滚轮平移

所有手势只通过 ZoomRegion 的接口修改视口，不直接接触图像。
"""

import logging
from dataclasses import dataclass
from enum import Enum, Flag
from typing import Dict, List, Optional, Tuple

from .viewport import Point, Rect, Size, ZoomRegion

logger = logging.getLogger(__name__)

WHEEL_STEP = 120  # 一格滚轮对应的角度增量


class Button(Enum):
    LEFT = "left"
    MIDDLE = "middle"
    RIGHT = "right"
    OTHER = "other"


class Modifier(Flag):
    NONE = 0
    SHIFT = 1
    CONTROL = 2
    ALT = 4
    META = 8


_MODIFIER_NAMES = {
    "shift": Modifier.SHIFT,
    "control": Modifier.CONTROL,
    "ctrl": Modifier.CONTROL,
    "alt": Modifier.ALT,
    "meta": Modifier.META,
}


def parse_modifiers(names) -> Modifier:
    """将修饰键名称列表转换为 Modifier"""
    if isinstance(names, str):
        names = [names]
    result = Modifier.NONE
    for name in names or []:
        result |= _MODIFIER_NAMES[name.lower()]
    return result


# ---- 事件 ----

@dataclass(frozen=True)
class PointerPress:
    pos: Point
    button: Button
    modifiers: Modifier = Modifier.NONE


@dataclass(frozen=True)
class PointerRelease:
    pos: Point
    button: Button
    modifiers: Modifier = Modifier.NONE


@dataclass(frozen=True)
class PointerMotion:
    pos: Point
    modifiers: Modifier = Modifier.NONE


@dataclass(frozen=True)
class Scroll:
    pos: Point
    dx: float
    dy: float
    modifiers: Modifier = Modifier.NONE


@dataclass(frozen=True)
class FocusLost:
    """失去指针捕获（窗口失焦等），取消进行中的手势"""


# ---- 结果 ----

@dataclass(frozen=True)
class Click:
    button: Button
    pos: Point  # 用户坐标


@dataclass
class GestureOutcome:
    view_changed: bool = False
    selection: Optional[Rect] = None
    click: Optional[Click] = None


@dataclass
class PointerState:
    """单次手势的临时状态"""
    kind: str
    origin: Point       # 屏幕坐标
    origin_user: Point  # 用户坐标
    last: Point         # 屏幕坐标


@dataclass
class GestureConfig:
    rubber_band_button: Button = Button.LEFT
    rubber_band_modifiers: Modifier = Modifier.NONE
    click_threshold: float = 3
    pan_button: Button = Button.MIDDLE
    pan_modifiers: Modifier = Modifier.NONE
    zoom_modifiers: Modifier = Modifier.CONTROL
    zoom_step: float = 0.15
    min_factor: float = 0.5
    max_factor: float = 2.0
    scroll_pan_modifiers: Modifier = Modifier.NONE
    swap_axes_modifier: Modifier = Modifier.SHIFT
    pan_fraction: float = 0.1
    secondary_button: Button = Button.RIGHT

    @classmethod
    def from_dict(cls, config: Dict) -> 'GestureConfig':
        """从 INTERACTION_CONFIG 格式的字典创建配置"""
        rb = config.get("rubber_band", {})
        dp = config.get("drag_pan", {})
        sz = config.get("scroll_zoom", {})
        sp = config.get("scroll_pan", {})
        sc = config.get("secondary_click", {})
        default = cls()
        return cls(
            rubber_band_button=Button(rb.get("button", default.rubber_band_button.value)),
            rubber_band_modifiers=parse_modifiers(rb.get("modifiers", [])),
            click_threshold=rb.get("click_threshold", default.click_threshold),
            pan_button=Button(dp.get("button", default.pan_button.value)),
            pan_modifiers=parse_modifiers(dp.get("modifiers", [])),
            zoom_modifiers=parse_modifiers(sz.get("modifiers", ["control"])),
            zoom_step=sz.get("step", default.zoom_step),
            min_factor=sz.get("min_factor", default.min_factor),
            max_factor=sz.get("max_factor", default.max_factor),
            scroll_pan_modifiers=parse_modifiers(sp.get("modifiers", [])),
            swap_axes_modifier=parse_modifiers(sp.get("swap_axes_modifier", "shift")),
            pan_fraction=sp.get("fraction", default.pan_fraction),
            secondary_button=Button(sc.get("button", default.secondary_button.value)),
        )


# ---- 手势处理器 ----

class DragGesture:
    """按下-移动-释放 类手势的基类"""
    kind = "drag"

    def __init__(self, config: GestureConfig):
        self.config = config
        self.state: Optional[PointerState] = None

    @property
    def active(self) -> bool:
        return self.state is not None

    def accepts(self, event: PointerPress) -> bool:
        raise NotImplementedError

    @property
    def button(self) -> Button:
        raise NotImplementedError

    def press(self, event: PointerPress, zoom: ZoomRegion, size: Size) -> GestureOutcome:
        self.state = PointerState(self.kind, event.pos, zoom.to_user(size, event.pos), event.pos)
        logger.debug("%s started at %s", self.kind, event.pos)
        return GestureOutcome()

    def motion(self, event: PointerMotion, zoom: ZoomRegion, size: Size) -> GestureOutcome:
        self.state.last = event.pos
        return GestureOutcome()

    def release(self, event: PointerRelease, zoom: ZoomRegion, size: Size) -> GestureOutcome:
        self.reset()
        return GestureOutcome()

    def reset(self):
        self.state = None

    def _travel(self, pos: Point) -> Tuple[float, float]:
        return abs(pos[0] - self.state.origin[0]), abs(pos[1] - self.state.origin[1])

    def _moved(self, pos: Point) -> bool:
        """任一方向移动达到阈值"""
        return max(self._travel(pos)) >= self.config.click_threshold


class RubberBandZoom(DragGesture):
    """框选缩放：Idle -> Dragging -> Idle"""
    kind = "rubber_band"

    @property
    def button(self) -> Button:
        return self.config.rubber_band_button

    def accepts(self, event: PointerPress) -> bool:
        return (event.button == self.config.rubber_band_button
                and event.modifiers == self.config.rubber_band_modifiers)

    def _spanned(self, pos: Point, zoom: ZoomRegion, size: Size) -> Rect:
        return Rect.from_corners(self.state.origin_user, zoom.to_user(size, pos))

    def motion(self, event, zoom, size):
        self.state.last = event.pos
        return GestureOutcome(selection=self._spanned(event.pos, zoom, size))

    def release(self, event, zoom, size):
        state = self.state
        if not self._moved(event.pos):
            # 两个方向都几乎没有移动，视为点击
            self.reset()
            return GestureOutcome(click=Click(self.button, state.origin_user))
        if min(self._travel(event.pos)) < self.config.click_threshold:
            # 一个方向上太窄，忽略
            self.reset()
            logger.debug("rubber band too thin, ignored")
            return GestureOutcome()
        rect = self._spanned(event.pos, zoom, size)
        self.reset()
        changed = zoom.set_current(rect)
        logger.debug("rubber band zoom to %s (changed=%s)", rect, changed)
        return GestureOutcome(view_changed=changed)


class DragPan(DragGesture):
    """拖动平移：拖动的是内容，所以方向与指针移动相反"""
    kind = "drag_pan"

    @property
    def button(self) -> Button:
        return self.config.pan_button

    def accepts(self, event: PointerPress) -> bool:
        return (event.button == self.config.pan_button
                and event.modifiers == self.config.pan_modifiers)

    def motion(self, event, zoom, size):
        sx, sy = zoom.scale(size)
        dx = (event.pos[0] - self.state.last[0]) * sx
        dy = (event.pos[1] - self.state.last[1]) * sy
        self.state.last = event.pos
        return GestureOutcome(view_changed=zoom.pan_by(-dx, -dy))


class SecondaryClick(DragGesture):
    """次键点击（按下后几乎没有移动再释放）"""
    kind = "secondary_click"

    @property
    def button(self) -> Button:
        return self.config.secondary_button

    def accepts(self, event: PointerPress) -> bool:
        return event.button == self.config.secondary_button

    def release(self, event, zoom, size):
        state = self.state
        moved = self._moved(event.pos)
        self.reset()
        if moved:
            return GestureOutcome()
        return GestureOutcome(click=Click(self.button, state.origin_user))


class ScrollZoom:
    """滚轮缩放（无状态）"""

    def __init__(self, config: GestureConfig):
        self.config = config

    def accepts(self, event: Scroll) -> bool:
        return event.modifiers == self.config.zoom_modifiers

    def factor(self, dy: float) -> float:
        steps = dy / WHEEL_STEP
        factor = 1 - self.config.zoom_step * steps
        return min(max(factor, self.config.min_factor), self.config.max_factor)

    def handle(self, event: Scroll, zoom: ZoomRegion, size: Size) -> GestureOutcome:
        if not event.dy:
            return GestureOutcome()
        center = zoom.to_user(size, event.pos)
        return GestureOutcome(view_changed=zoom.zoom_at(center, self.factor(event.dy)))


class ScrollPan:
    """滚轮平移（无状态）"""

    def __init__(self, config: GestureConfig):
        self.config = config

    def accepts(self, event: Scroll) -> bool:
        mods = event.modifiers & ~self.config.swap_axes_modifier
        return mods == self.config.scroll_pan_modifiers

    def handle(self, event: Scroll, zoom: ZoomRegion, size: Size) -> GestureOutcome:
        steps_x = event.dx / WHEEL_STEP
        steps_y = event.dy / WHEEL_STEP
        if self.config.swap_axes_modifier and event.modifiers & self.config.swap_axes_modifier:
            steps_x, steps_y = steps_y, steps_x
        if not (steps_x or steps_y):
            return GestureOutcome()
        cur = zoom.current
        fraction = self.config.pan_fraction
        changed = zoom.pan_by(-steps_x * fraction * cur.width, -steps_y * fraction * cur.height)
        return GestureOutcome(view_changed=changed)


class GestureController:
    """手势分发：同一时刻只有一个活动手势"""

    def __init__(self, zoom: ZoomRegion, config: Optional[GestureConfig] = None):
        self.zoom = zoom
        self.config = config or GestureConfig()
        self.rubber_band = RubberBandZoom(self.config)
        self.drag_pan = DragPan(self.config)
        self.secondary_click = SecondaryClick(self.config)
        self.scroll_zoom = ScrollZoom(self.config)
        self.scroll_pan = ScrollPan(self.config)
        self._drag_gestures: List[DragGesture] = [
            self.rubber_band, self.drag_pan, self.secondary_click
        ]
        self._scroll_gestures = [self.scroll_zoom, self.scroll_pan]
        self._active: Optional[DragGesture] = None

    @property
    def active(self) -> Optional[DragGesture]:
        return self._active

    def reset(self):
        """取消所有进行中的手势"""
        for gesture in self._drag_gestures:
            gesture.reset()
        self._active = None

    def dispatch(self, event, size: Size) -> GestureOutcome:
        """处理一个输入事件，未识别的事件被忽略"""
        if isinstance(event, FocusLost):
            if self._active is not None:
                logger.debug("%s cancelled", self._active.kind)
            self.reset()
            return GestureOutcome()

        if self._active is not None:
            return self._dispatch_active(event, size)

        if isinstance(event, PointerPress):
            for gesture in self._drag_gestures:
                if gesture.accepts(event):
                    self._active = gesture
                    return gesture.press(event, self.zoom, size)
        elif isinstance(event, Scroll):
            for gesture in self._scroll_gestures:
                if gesture.accepts(event):
                    return gesture.handle(event, self.zoom, size)
        return GestureOutcome()

    def _dispatch_active(self, event, size: Size) -> GestureOutcome:
        gesture = self._active
        if isinstance(event, PointerMotion):
            return gesture.motion(event, self.zoom, size)
        if isinstance(event, PointerRelease) and event.button == gesture.button:
            self._active = None
            return gesture.release(event, self.zoom, size)
        # 拖动过程中忽略滚轮和其他按键
        return GestureOutcome()
