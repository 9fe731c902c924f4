"""
火焰图光栅化：调用树 -> (颜色图像, 标签图像)
"""

import logging
from typing import Callable, Optional

import numpy as np
import pyqtgraph as pg

from .flame_tree import FlameNode, FrameTag, UNKNOWN

logger = logging.getLogger(__name__)


def color_to_argb(color) -> int:
    """将任意颜色描述转换为 0xAARRGGBB"""
    return pg.mkColor(color).rgba()


class FlameImage:
    """用于显示的图像对

    pixels 已经上下翻转（最外层帧在底部），tags 保持深度顺序（第0行为深度1）
    """

    def __init__(self, pixels: np.ndarray, tags: np.ndarray):
        self.pixels = pixels
        self.tags = tags

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]


class FlameRaster:
    """光栅化结果，第0行为合成根节点"""

    def __init__(self, pixels: np.ndarray, tags: np.ndarray):
        self.pixels = pixels
        self.tags = tags

    @property
    def shape(self):
        return self.pixels.shape

    def for_display(self) -> Optional[FlameImage]:
        """丢弃根节点行并翻转为显示方向"""
        if self.pixels.shape[0] < 2:
            return None
        pixels = np.ascontiguousarray(self.pixels[1:][::-1])
        tags = self.tags[1:].copy()
        return FlameImage(pixels, tags)


def flame_pixels(tree: Optional[FlameNode], fcolor: Callable[[FrameTag], object]) -> Optional[FlameRaster]:
    """生成颜色图像和标签图像

    Args:
        tree: 调用树，根节点宽度等于总采样数
        fcolor: 帧 -> 颜色 的函数，UNKNOWN 对应背景色

    Returns:
        FlameRaster: 空树返回 None
    """
    if tree is None or tree.width <= 0:
        return None

    rows = tree.depth() + 1
    cols = tree.width

    pixels = np.full((rows, cols), color_to_argb(fcolor(UNKNOWN)), dtype=np.uint32)
    tags = np.full((rows, cols), UNKNOWN, dtype=object)

    # 同一帧的颜色只计算一次
    color_cache = {}

    # 显式栈遍历，避免深调用树导致递归溢出
    stack = [(tree, 0, 0)]
    while stack:
        node, x, depth = stack.pop()
        if node.width > 0:
            frame = node.frame
            if frame not in color_cache:
                color_cache[frame] = color_to_argb(fcolor(frame))
            pixels[depth, x:x + node.width] = color_cache[frame]
            tags[depth, x:x + node.width] = frame

        # 子节点从左到右紧密排列，逆序入栈以保持遍历顺序
        offsets = []
        child_x = x
        for child in node.children:
            offsets.append((child, child_x, depth + 1))
            child_x += child.width
        stack.extend(reversed(offsets))

    logger.debug("rasterized flame graph: %d rows x %d columns", rows, cols)
    return FlameRaster(pixels, tags)
