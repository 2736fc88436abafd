"""
Tests for tagged console output.
"""

from __future__ import annotations

import io

from nadm_cli import config
from nadm_cli.ui import ConsoleUI


def make_ui(plain: bool, cfg=None) -> tuple[ConsoleUI, io.StringIO, io.StringIO]:
    out, err = io.StringIO(), io.StringIO()
    return ConsoleUI(cfg, plain=plain, stdout=out, stderr=err), out, err


def test_plain_info_goes_to_stdout():
    ui, out, err = make_ui(plain=True)

    ui.info("BUILD", "Build complete")

    assert out.getvalue() == "[BUILD] Build complete\n"
    assert err.getvalue() == ""


def test_plain_error_goes_to_stderr():
    ui, out, err = make_ui(plain=True)

    ui.error("Error: Could not load core.sh")

    assert err.getvalue() == "[ERR] Error: Could not load core.sh\n"
    assert out.getvalue() == ""


def test_format_tag_colors_from_config():
    cfg = config.YAMLConfig({"ui": {"tags": {"BUILD": "yellow"}}})
    ui, _, _ = make_ui(plain=False, cfg=cfg)

    tag = ui.format_tag("BUILD")

    assert tag.startswith(config.ANSI_COLORS["yellow"])
    assert tag.endswith(config.ANSI_COLORS["reset"])
    assert "[BUILD]" in tag


def test_format_tag_falls_back_to_builtin_colors():
    ui, _, _ = make_ui(plain=False)

    assert ui.format_tag("ERR").startswith(config.ANSI_COLORS["red"])
    assert ui.format_tag("UNKNOWN").startswith(config.ANSI_COLORS["dim"])


def test_format_tag_plain_has_no_ansi():
    ui, _, _ = make_ui(plain=True)

    assert ui.format_tag("ERR") == "[ERR]"


def test_colored_output_to_non_tty_is_plain_text():
    """prompt_toolkit drops the escape codes when the stream is not a TTY."""
    ui, out, err = make_ui(plain=False)

    ui.info("BUILD", "done")
    ui.error("failed")

    assert "[BUILD] done" in out.getvalue()
    assert "\x1b" not in out.getvalue()
    assert "[ERR] failed" in err.getvalue()


def test_plain_defaults_to_env(monkeypatch):
    monkeypatch.setenv("NADM_PLAIN_OUTPUT", "1")
    assert ConsoleUI().plain is True

    monkeypatch.delenv("NADM_PLAIN_OUTPUT")
    assert ConsoleUI().plain is False


def test_plain_error_with_crash_tag():
    ui, out, err = make_ui(plain=True)

    ui.error("Unhandled exception: RuntimeError: x", tag="CRASH")

    assert err.getvalue() == "[CRASH] Unhandled exception: RuntimeError: x\n"
    assert out.getvalue() == ""


def test_builtin_tag_colors_cover_emitted_tags_only():
    assert set(config.TAG_COLORS) == {"BUILD", "ERR", "CRASH"}
    packaged = config.load_system_config().ui["tags"]
    assert set(packaged) == set(config.TAG_COLORS)
