# nadm — Embedded Shell Script Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Protocol definitions for dependency injection.

These interfaces keep the launcher independent of how scripts are
obtained and how the shell is spawned.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .executor import ShellResult  # pragma: no cover


# Returns a script body, or None when this source has nothing to offer
ScriptProvider = Callable[[], str | None]


class Executor(Protocol):
    """Protocol for inline shell execution."""

    def run_inline(
        self,
        script: str,
        shell: str = "bash",
        extra_env: dict[str, str] | None = None,
    ) -> ShellResult:
        """Run a script through ``shell -c`` with inherited stdio."""
        ...


class Console(Protocol):
    """Protocol for user-facing output."""

    def info(self, tag: str, message: str) -> None:
        """Write a tagged status line to stdout."""
        ...

    def error(self, message: str, tag: str = "ERR") -> None:
        """Write a tagged error line to stderr."""
        ...
