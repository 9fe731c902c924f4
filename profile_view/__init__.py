import logging
import sys
from typing import Optional, Set

from PySide6.QtWidgets import QApplication

from .core.colors import FlameColors, default_colors
from .core.flame_tree import FlameNode, StackFrame, UNKNOWN, build_flame_tree, is_known
from .core.rasterizer import flame_pixels
from .ui.ProfileWindow import ProfileWindow

logger = logging.getLogger(__name__)

# 保持窗口引用，关闭时移除
_open_windows: Set[ProfileWindow] = set()
_app = None


def init_logging(level=logging.INFO):
    """
    Configure logging for the profile_view package.
    Adds a StreamHandler if none exists.
    """
    package_logger = logging.getLogger("profile_view")
    package_logger.setLevel(level)

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
        package_logger.propagate = False


def view(data, fcolor=None, fontsize: Optional[int] = None, config=None, editor=None) -> Optional[ProfileWindow]:
    """显示火焰图

    Args:
        data: FlameNode 调用树，或者可以传给 build_flame_tree 的堆栈序列
        fcolor: 帧 -> 颜色 的函数，默认为 default_colors；
            可以提供 font 属性作为标签颜色
        fontsize: 悬停标签字号(px)

    Returns:
        ProfileWindow: 数据为空时返回 None
    """
    if isinstance(data, FlameNode):
        tree = data
    else:
        tree = build_flame_tree(data if data is not None else [])
    if tree is None:
        logger.warning("nothing to show: the profile is empty")
        return None
    tree.validate()

    fcolor = fcolor or default_colors
    raster = flame_pixels(tree, fcolor)
    image = raster.for_display() if raster is not None else None
    if image is None:
        logger.warning("nothing to show: the profile has no frames")
        return None

    # 确保存在 QApplication
    global _app
    _app = QApplication.instance() or QApplication(sys.argv)

    window = ProfileWindow(image, font_color=getattr(fcolor, "font", None), font_size=fontsize,
                           config=config, editor=editor)
    _open_windows.add(window)
    window.closed.connect(_open_windows.discard)
    window.show()
    logger.info("opened profile view (%d x %d)", image.width, image.height)
    return window


def open_windows() -> Set[ProfileWindow]:
    return set(_open_windows)


def closeall():
    """关闭所有打开的火焰图窗口"""
    for window in list(_open_windows):
        window.close()
    _open_windows.clear()


__all__ = [
    "FlameColors", "FlameNode", "ProfileWindow", "StackFrame", "UNKNOWN",
    "build_flame_tree", "closeall", "default_colors", "flame_pixels",
    "init_logging", "is_known", "open_windows", "view",
]
