"""
交互配置文件，定义鼠标按键/修饰键与手势的对应关系
"""

INTERACTION_CONFIG = {
    # 框选缩放
    "rubber_band": {
        "button": "left",
        "modifiers": [],
        "click_threshold": 3,      # 小于该像素数的拖动视为点击
    },
    # 拖动平移
    "drag_pan": {
        "button": "middle",
        "modifiers": [],
    },
    # 滚轮缩放
    "scroll_zoom": {
        "modifiers": ["control"],
        "step": 0.15,              # factor = 1 - step * 滚动格数
        "min_factor": 0.5,
        "max_factor": 2.0,
    },
    # 滚轮平移
    "scroll_pan": {
        "modifiers": [],
        "swap_axes_modifier": "shift",   # 按住时竖直滚动变为水平平移
        "fraction": 0.1,                 # 每格平移当前视图宽/高的比例
    },
    # 右键点击（在编辑器中打开）
    "secondary_click": {
        "button": "right",
    },
}

# 编辑器启动配置
EDITOR_CONFIG = {
    "command": None,                   # 例如 "code --goto {file}:{line}"，为空时使用 $VISUAL/$EDITOR
    "default_template": "{editor} +{line} {file}",
    "env_vars": {},
}
