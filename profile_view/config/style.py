"""
全局样式配置
"""

# 主题色
COLORS = {
    "background": "#ffffff",
    "font": "#000000",
    "selection": "#2962ff",       # 框选边框
    "selection_fill": "#402962ff",  # 半透明框选填充 (#AARRGGBB)
    "status": "#263238",
}

# 字体
FONTS = {
    "label": "sans-serif",
    "size": 14,            # 悬停标签字号(px)
    "label_margin": 2,     # 标签重绘区域向外扩展的像素
}

# 窗口
WINDOW = {
    "title": "Profile",
    "width": 800,
    "height": 600,
}

# 样式表
STYLESHEETS = {
    "status_bar": """
        QStatusBar {
            background-color: %(status)s;
            color: #ffffff;
            font-family: monospace;
            padding: 2px;
        }
    """ % COLORS,
}
