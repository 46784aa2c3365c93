from crux.cli.ui import painter
from crux.cli.ui.painter import (
    format_line,
    highlight_inline,
    pad_visible,
    render_markdown,
    strip_ansi,
    truncate_visible,
    visible_width,
)
from crux.cli.ui.theme import Theme


class TestVisibleWidth:
    def test_escapes_do_not_count(self):
        assert visible_width(f"{Theme.ERROR}ab{Theme.RESET}") == 2

    def test_wide_characters_count_twice(self):
        assert visible_width("中文") == 4

    def test_combining_marks_count_zero(self):
        assert visible_width("e\u0301") == 1

    def test_pad_keeps_original_escapes(self):
        text = f"{Theme.SUCCESS}ok{Theme.RESET}"
        padded = pad_visible(text, 5)
        assert padded.startswith(text)
        assert visible_width(padded) == 5

    def test_pad_never_shrinks(self):
        assert pad_visible("abcdef", 3) == "abcdef"


class TestTruncateVisible:
    def test_short_text_untouched(self):
        assert truncate_visible("abc", 10) == "abc"

    def test_cut_keeps_escape_and_resets(self):
        cut = truncate_visible(f"{Theme.ERROR}abcdef{Theme.RESET}", 3)
        assert strip_ansi(cut) == "abc"
        assert cut.startswith(Theme.ERROR)
        assert cut.endswith(Theme.RESET)

    def test_wide_character_not_split(self):
        assert truncate_visible("a中b", 2) == "a"


class TestFormatLine:
    def test_headers_are_bold_without_prefix(self):
        for line in ("# Title", "## Title", "### Title"):
            assert format_line(line) == f"{Theme.BOLD}{Theme.HEADING}Title{Theme.RESET}"

    def test_four_hashes_is_not_a_header(self):
        assert "####" in format_line("#### deep")

    def test_horizontal_rule(self):
        for line in ("---", "*****"):
            rendered = format_line(line)
            assert strip_ansi(rendered) == "─" * 40

    def test_bullets(self):
        assert strip_ansi(format_line("- item")) == "• item"
        assert strip_ansi(format_line("  * nested")) == "  • nested"

    def test_plain_line_unchanged(self):
        assert format_line("just text") == "just text"

    def test_inline_styles(self):
        rendered = highlight_inline("**bold** then *soft* and `code`")
        assert f"{Theme.BOLD}bold{Theme.NORMAL_INTENSITY}" in rendered
        assert f"{Theme.DIM}soft{Theme.NORMAL_INTENSITY}" in rendered
        assert f"{Theme.INLINE_CODE}code{Theme.DEFAULT_FG}" in rendered
        assert strip_ansi(rendered) == "bold then soft and code"

    def test_bullet_line_gets_inline_styles(self):
        rendered = format_line("- **key** value")
        assert strip_ansi(rendered) == "• key value"


class TestRenderMarkdown:
    def test_empty(self):
        assert render_markdown("") == ""

    def test_renders_emphasis_without_markers(self):
        rendered = render_markdown("Some **bold** words", width=60)
        plain = strip_ansi(rendered)
        assert "bold" in plain
        assert "**" not in plain
        assert not rendered.endswith("\n")

    def test_falls_back_to_line_heuristics(self, monkeypatch):
        def broken(*_args, **_kwargs):
            raise RuntimeError("no markdown today")

        monkeypatch.setattr(painter, "Markdown", broken)
        assert render_markdown("# Head\n- item", width=60) == "\n".join(
            [format_line("# Head"), format_line("- item")]
        )
