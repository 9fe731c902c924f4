import zlib

import pyqtgraph as pg

from .flame_tree import FrameTag, is_known


class FlameColors:
    """默认配色：按函数名分配色相，未知帧使用背景色"""

    def __init__(self, hues: int = 24, background=(255, 255, 255), font=(0, 0, 0)):
        self.hues = hues
        self.background = pg.mkColor(background)
        self.font = pg.mkColor(font)

    def __call__(self, frame: FrameTag):
        if not is_known(frame):
            return self.background
        # crc32 保证多次运行颜色一致（内置 hash 会随机化）
        index = zlib.crc32(frame.func.encode("utf-8")) % self.hues
        return pg.intColor(index, hues=self.hues, values=1, minValue=200, sat=140)


default_colors = FlameColors()
