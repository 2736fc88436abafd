# nadm — Embedded Shell Script Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Run-time launcher for core.sh.

Resolution order for the script body:
1. the literal embedded by ``nadm-build`` (EMBEDDED_SCRIPT)
2. core.sh read from disk beside this module (development checkout)

The body runs as ``bash -c "<body>\\nmain"``. All arguments are joined with
single spaces into NADM_ARGS; the script parses that string itself.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

from . import config
from .config import LauncherSettings
from .executor import SubprocessExecutor
from .interfaces import Console, Executor, ScriptProvider
from .ui import ConsoleUI

# Replaced with the script text at build time. Must stay the only
# occurrence of the placeholder in this file.
EMBEDDED_SCRIPT = '{{CORE_SH}}'


class ScriptLoadError(Exception):
    """Neither the embedded script nor the fallback file is available."""


def _unquote(token: str) -> str:
    if len(token) >= 2 and token[0] == token[-1] and token[0] in "'\"`":
        return token[1:-1]
    return token


def is_embedded(value: str, placeholder: str) -> bool:
    """True when ``value`` is not the unsubstituted placeholder text."""
    return value != _unquote(placeholder)


def embedded_provider(placeholder: str) -> ScriptProvider:
    def _provide() -> str | None:
        if is_embedded(EMBEDDED_SCRIPT, placeholder):
            return EMBEDDED_SCRIPT
        return None

    return _provide


def fallback_provider(path: Path) -> ScriptProvider:
    def _provide() -> str | None:
        with path.open("r", encoding="utf-8", newline="") as f:
            return f.read()

    return _provide


def default_providers(settings: LauncherSettings) -> list[ScriptProvider]:
    return [
        embedded_provider(settings.placeholder),
        fallback_provider(settings.fallback_path),
    ]


def resolve_script(providers: Iterable[ScriptProvider]) -> str:
    """Return the first script body any provider yields.

    A provider failing with OSError counts as unavailable.

    Raises:
        ScriptLoadError: no provider produced a body
    """
    for provider in providers:
        try:
            script = provider()
        except (OSError, UnicodeDecodeError):
            continue
        if script is not None:
            return script
    raise ScriptLoadError("no script source available")


def build_command(script: str, entry_point: str) -> str:
    return script + "\n" + entry_point


def join_args(args: Sequence[str]) -> str:
    """Join arguments with single spaces. No quoting is applied."""
    return " ".join(args)


def exit_status(exit_code: int | None) -> int:
    """Shell status, or 0 when the shell reported none."""
    return exit_code or 0


def launch(
    args: Sequence[str],
    executor: Executor | None = None,
    providers: Iterable[ScriptProvider] | None = None,
    settings: LauncherSettings | None = None,
    console: Console | None = None,
) -> int:
    """Resolve the script, run it, and return the exit status to use.

    Args:
        args: invocation arguments (without the program name)
        executor: shell runner (default: SubprocessExecutor)
        providers: script sources in priority order
        settings: launcher parameters (default: from system.yaml)
        console: where the load error is reported

    Returns:
        Exit status for the launcher process
    """
    if settings is None:
        settings = config.launcher_settings()
    if console is None:
        console = ConsoleUI()
    if providers is None:
        providers = default_providers(settings)

    try:
        script = resolve_script(providers)
    except ScriptLoadError:
        console.error(f"Error: Could not load {settings.script_name}")
        return 1

    if executor is None:
        executor = SubprocessExecutor()

    result = executor.run_inline(
        build_command(script, settings.entry_point),
        shell=settings.shell,
        extra_env={settings.args_env: join_args(args)},
    )
    return exit_status(result.exit_code)
