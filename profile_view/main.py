import sys

from PySide6.QtWidgets import QApplication

from profile_view import StackFrame, init_logging, view


def demo_stacks():
    """示例采样数据"""
    main = StackFrame("app/main.py", "main", 12)
    load = StackFrame("app/io.py", "load_config", 40)
    parse = StackFrame("app/io.py", "parse", 88)
    run = StackFrame("app/engine.py", "run", 25)
    step = StackFrame("app/engine.py", "step", 61)
    solve = StackFrame("app/solver.py", "solve", 130)
    render = StackFrame("app/render.py", "render_frame", 17)
    return [
        ([main, load, parse], 120),
        ([main, load], 30),
        ([main, run, step, solve], 420),
        ([main, run, step], 90),
        ([main, run, render], 260),
        ([main], 15),
    ]


def main():
    app = QApplication(sys.argv)

    # 设置应用样式
    app.setStyle("Fusion")
    init_logging()

    window = view(demo_stacks())
    if window is None:
        return 1

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
