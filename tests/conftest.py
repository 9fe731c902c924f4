"""公共测试夹具

- Qt 使用 offscreen 平台运行
- 小型调用树样本
"""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

from profile_view.core.flame_tree import FlameNode, StackFrame, UNKNOWN


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture()
def frame_a() -> StackFrame:
    return StackFrame("/src/pkg/alpha.py", "alpha", 10)


@pytest.fixture()
def frame_b() -> StackFrame:
    return StackFrame("/src/pkg/beta.py", "beta", 20)


@pytest.fixture()
def two_children(frame_a, frame_b) -> FlameNode:
    """根节点宽度100，两个子节点宽度60和40"""
    root = FlameNode(UNKNOWN, 100)
    root.add_child(FlameNode(frame_a, 60))
    root.add_child(FlameNode(frame_b, 40))
    return root


@pytest.fixture()
def nested_tree() -> FlameNode:
    """三层完全覆盖的调用链，宽度100"""
    root = FlameNode(UNKNOWN, 100)
    node = root
    for depth in range(1, 4):
        node = node.add_child(FlameNode(StackFrame(f"/src/level{depth}.py", f"level{depth}", depth), 100))
    return root
