"""Tests for the Rich console factory and theme."""

from rich.text import Text

from envbind.output.console import ENVBIND_THEME, create_console, get_output, style_for_source


class TestCreateConsole:
    def test_renders_to_buffer(self) -> None:
        console = create_console(no_color=True)
        console.print("hello")
        assert get_output(console) == "hello\n"

    def test_default_width(self) -> None:
        assert create_console().width == 120

    def test_width_override(self) -> None:
        assert create_console(width=60).width == 60

    def test_theme_styles_resolve(self) -> None:
        console = create_console(no_color=True)
        console.print(Text("OK", style="envbind.ok"), Text("PORT", style="envbind.envkey"))
        assert get_output(console).strip() == "OK PORT"

    def test_theme_has_source_styles(self) -> None:
        for name in ("envbind.source.env", "envbind.source.default", "envbind.source.zero"):
            assert name in ENVBIND_THEME.styles


class TestStyleForSource:
    def test_known_sources(self) -> None:
        assert style_for_source("env") == "envbind.source.env"
        assert style_for_source("default") == "envbind.source.default"
        assert style_for_source("zero") == "envbind.source.zero"

    def test_unknown_source(self) -> None:
        assert style_for_source("other") == ""
