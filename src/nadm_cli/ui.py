# nadm — Embedded Shell Script Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

from __future__ import annotations

import sys
from typing import TextIO

from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.shortcuts import print_formatted_text

from . import config
from .config import ANSI_COLORS, TAG_COLORS


def _tag_color(cfg: config.YAMLConfig | None, tag: str) -> str:
    color = TAG_COLORS.get(tag, "dim")
    if cfg is not None:
        tags = cfg.ui.get("tags", {})
        if isinstance(tags, dict) and isinstance(tags.get(tag), str):
            color = tags[tag]
    return ANSI_COLORS.get(color, "")


class ConsoleUI:
    """Tagged status/error lines for the build and launch entry points.

    Output goes through prompt_toolkit so ANSI tags render on terminals and
    degrade to plain text when the stream is redirected.
    """

    def __init__(
        self,
        cfg: config.YAMLConfig | None = None,
        plain: bool | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.cfg = cfg
        self.plain = config.plain_output() if plain is None else plain
        self._stdout = stdout
        self._stderr = stderr

    def format_tag(self, tag: str) -> str:
        if self.plain:
            return f"[{tag}]"
        reset = ANSI_COLORS["reset"]
        return f"{_tag_color(self.cfg, tag)}[{tag}]{reset}"

    def _emit(self, text: str, file: TextIO) -> None:
        if self.plain:
            file.write(text + "\n")
            file.flush()
            return
        print_formatted_text(ANSI(text), file=file, flush=True)

    def info(self, tag: str, message: str) -> None:
        self._emit(
            f"{self.format_tag(tag)} {message}", self._stdout or sys.stdout
        )

    def error(self, message: str, tag: str = "ERR") -> None:
        self._emit(
            f"{self.format_tag(tag)} {message}", self._stderr or sys.stderr
        )
