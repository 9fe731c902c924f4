from PySide6.QtWidgets import QMainWindow, QToolBar
from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtGui import QAction, QKeySequence, QShortcut
from typing import Optional
import logging

from ..core.editor import EditorLauncher
from ..core.gestures import GestureConfig
from ..core.hit_test import frame_location
from ..core.flame_tree import StackFrame
from ..core.rasterizer import FlameImage
from ..config.style import STYLESHEETS, WINDOW
from .FlameCanvas import FlameCanvas

logger = logging.getLogger(__name__)


class ProfileWindow(QMainWindow):
    """火焰图查看窗口"""

    closed = Signal(object)

    def __init__(self, image: FlameImage, font_color=None, font_size: Optional[int] = None,
                 config: Optional[GestureConfig] = None, editor: Optional[EditorLauncher] = None):
        super().__init__()
        self.setWindowTitle(WINDOW["title"])
        self.resize(WINDOW["width"], WINDOW["height"])
        self.setAttribute(Qt.WA_DeleteOnClose)

        self.editor = editor or EditorLauncher()
        self.canvas = FlameCanvas(image, font_color=font_color, font_size=font_size, config=config)

        self.setup_ui()

    def setup_ui(self):
        # 工具栏
        toolbar = QToolBar()
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        reset_action = QAction("重置视图", self)
        reset_action.setStatusTip("显示完整火焰图")
        reset_action.triggered.connect(self.canvas.reset_view)
        toolbar.addAction(reset_action)

        self.setCentralWidget(self.canvas)

        # Ctrl+Q / Ctrl+W 关闭窗口
        for key in ("Ctrl+Q", "Ctrl+W"):
            shortcut = QShortcut(QKeySequence(key), self)
            shortcut.activated.connect(self.close)

        # 设置数据联动
        self.canvas.frame_located.connect(self.on_frame_located)
        self.canvas.edit_requested.connect(self.on_edit_requested)

        # 状态栏
        self.statusBar().setStyleSheet(STYLESHEETS["status_bar"])
        self.statusBar().showMessage("就绪")

    @Slot(str, str, int)
    def on_frame_located(self, file: str, func: str, line: int):
        """左键点击：在控制台输出完整位置"""
        location = frame_location(StackFrame(file, func, line))
        print(location)
        logger.info("located %s", location)
        self.statusBar().showMessage(location)

    @Slot(str, int)
    def on_edit_requested(self, file: str, line: int):
        """右键点击：在编辑器中打开"""
        if self.editor.open(file, line):
            self.statusBar().showMessage(f"已在编辑器中打开: {file}:{line}")
        else:
            self.statusBar().showMessage(f"无法打开编辑器: {file}:{line}")

    def closeEvent(self, event):
        """关闭事件处理"""
        logger.info("profile window closed")
        self.closed.emit(self)
        event.accept()
