from crux.cli.ui.box import box_content_width, draw_box
from crux.cli.ui.painter import strip_ansi, visible_width
from crux.cli.ui.theme import BoxStyle, Theme


def _right_border_columns(box: str):
    return [strip_ansi(line).rindex(Theme.BOX_VERTICAL) for line in box.split("\n")[1:-1]]


def test_uniform_right_border_with_mixed_escapes():
    lines = [
        f"{Theme.ERROR}red{Theme.RESET}",
        f"{Theme.BOLD}{Theme.SUCCESS}green and bold{Theme.RESET}",
        "plain",
    ]
    box = draw_box(lines, columns=30)
    rows = box.split("\n")

    assert len(rows) == 5
    assert len(set(_right_border_columns(box))) == 1
    assert {visible_width(row) for row in rows} == {30}


def test_content_is_padded_not_stripped():
    colored = f"{Theme.WARNING}warn{Theme.RESET}"
    box = draw_box([colored], columns=20)
    assert colored in box


def test_long_lines_are_truncated_to_box():
    box = draw_box(["x" * 100, "中" * 40], columns=24)
    assert {visible_width(row) for row in box.split("\n")} == {24}


def test_border_color():
    box = draw_box(["a"], border_color=Theme.ERROR, columns=20)
    assert box.startswith(f"{Theme.ERROR}{Theme.BOX_TOP_LEFT}")


def test_content_width_uses_margin():
    assert box_content_width(80) == 76
    assert box_content_width(80, BoxStyle(margin=10)) == 70
