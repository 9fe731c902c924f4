from typing import Iterable, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, field
import re


@dataclass(frozen=True)
class StackFrame:
    """调用帧信息"""
    file: str
    func: str
    line: int = 0

    @staticmethod
    def parse(text: str) -> 'StackFrame':
        """解析帧描述文本"""
        text = text.strip()
        # 匹配格式：func (file:line)
        match = re.match(r'(.+?)\s+\(([^()]+):(\d+)\)$', text)
        if match:
            func, file, line = match.groups()
            return StackFrame(file, func, int(line))
        # 匹配格式：file:line:func
        match = re.match(r'(.+):(\d+):(.+)$', text)
        if match:
            file, line, func = match.groups()
            return StackFrame(file, func, int(line))
        # 简单格式：只有函数名
        return StackFrame("", text, 0)


class UnknownFrame:
    """未知帧（根节点填充或无对应帧的像素）"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "UNKNOWN"


UNKNOWN = UnknownFrame()

FrameTag = Union[StackFrame, UnknownFrame]


def is_known(tag: FrameTag) -> bool:
    return isinstance(tag, StackFrame)


@dataclass
class FlameNode:
    """火焰图调用树节点，width 为包含子节点在内的采样数"""
    frame: FrameTag
    width: int
    children: List['FlameNode'] = field(default_factory=list)

    def add_child(self, child: 'FlameNode') -> 'FlameNode':
        self.children.append(child)
        return child

    def depth(self) -> int:
        """获取最大深度（根节点为0）"""
        max_depth = 0
        stack = [(self, 0)]
        while stack:
            node, depth = stack.pop()
            max_depth = max(max_depth, depth)
            stack.extend((child, depth + 1) for child in node.children)
        return max_depth

    def validate(self):
        """检查子节点宽度之和不超过父节点宽度"""
        stack = [self]
        while stack:
            node = stack.pop()
            if node.width < 0:
                raise ValueError(f"节点宽度为负: {node.frame!r} ({node.width})")
            total = sum(child.width for child in node.children)
            if total > node.width:
                raise ValueError(
                    f"子节点宽度之和 {total} 超过父节点 {node.frame!r} 的宽度 {node.width}"
                )
            stack.extend(node.children)


Stack = Union[Sequence[StackFrame], Tuple[Sequence[StackFrame], int]]


def _split_stack(stack) -> Tuple[Sequence[StackFrame], int]:
    # (frames, weight) 或者单独的帧序列
    if (isinstance(stack, (tuple, list)) and len(stack) == 2
            and isinstance(stack[1], int) and not isinstance(stack[1], bool)):
        return stack[0], stack[1]
    return stack, 1


def build_flame_tree(stacks: Iterable[Stack]) -> Optional[FlameNode]:
    """从采样堆栈构建调用树

    Args:
        stacks: 堆栈序列，每个堆栈按从外到内的顺序排列帧，
            可以附带权重 (frames, weight)

    Returns:
        FlameNode: 根节点为 UNKNOWN；没有采样时返回 None
    """
    root = FlameNode(UNKNOWN, 0)

    for stack in stacks:
        frames, weight = _split_stack(stack)
        if weight <= 0:
            continue

        # 从根节点开始
        current = root
        root.width += weight

        for frame in frames:
            if not isinstance(frame, StackFrame):
                raise ValueError(f"堆栈中的帧必须是 StackFrame: {frame!r}")
            # 查找或创建子节点，保持首次出现的顺序
            child = None
            for existing in current.children:
                if existing.frame == frame:
                    child = existing
                    break

            if child is None:
                child = current.add_child(FlameNode(frame, weight))
            else:
                child.width += weight

            current = child

    if root.width == 0:
        return None
    return root
